import random

import pytest

from matchday.config import TeamGenerationSettings
from matchday.exceptions import PlayerPoolError, TeamConfigurationError
from matchday.models.ranking import RankingRecord, RankingTable, Rating
from matchday.models.team import TeamConfig
from matchday.teams.generator import (
    TeamGenerationRequest,
    TeamGenerator,
    calculate_configurations,
    eligible_players,
    generate_team_names,
    team_balance,
)
from matchday.teams.teammate_history import TeammateHistory
from matchday.utils import pair_key


def _players(count):
    return [f"P{i:02d}" for i in range(1, count + 1)]


def _rankings(points_by_player, rating=1000.0, appearances=6):
    players = {
        name: RankingRecord(
            appearances=appearances,
            points=int(points),
            ranking_points=float(points),
            rating=Rating(value=rating),
        )
        for name, points in points_by_player.items()
    }
    return RankingTable(season="2025", players=players)


def _generate(players, sizes, method="seeded", **kwargs):
    generator = TeamGenerator(rng=random.Random(7))
    request = TeamGenerationRequest(
        players=players,
        config=TeamConfig(teams=len(sizes), team_sizes=sizes),
        method=method,
        team_names=[f"T{i + 1}" for i in range(len(sizes))],
        **kwargs,
    )
    return generator.generate(request)


@pytest.mark.parametrize(
    "sizes", [[5, 5], [6, 6, 5], [7, 6, 6, 5], [1, 1], [3], [5, 5, 5, 5, 4]]
)
def test_random_teams_match_sizes_and_use_every_player_once(sizes):
    players = _players(sum(sizes))
    result = _generate(players, sizes, method="random")

    assert [len(team) for team in result.teams.values()] == sizes
    assigned = [p for team in result.teams.values() for p in team]
    assert sorted(assigned) == sorted(players)
    assert result.to_dict()["config"] == {
        "method": "random",
        "teams": len(sizes),
        "totalPlayers": len(players),
        "playersUsed": len(players),
    }


def test_random_teams_are_reproducible_with_seeded_rng():
    first = _generate(_players(12), [6, 6], method="random")
    second = _generate(_players(12), [6, 6], method="random")
    assert first.teams == second.teams


def test_seeded_top_two_never_share_a_team():
    players = _players(17)
    rankings = _rankings({p: 100 - i for i, p in enumerate(players)})
    for sizes in ([9, 8], [6, 6, 5], [5, 4, 4, 4]):
        result = _generate(players, sizes, rankings=rankings)
        team_of = {p: name for name, team in result.teams.items() for p in team}
        assert team_of["P01"] != team_of["P02"]


def test_seeded_snake_draft_order():
    players = ["A", "B", "C", "D", "E", "F"]
    rankings = _rankings({"A": 6, "B": 5, "C": 4, "D": 3, "E": 2, "F": 1})
    result = _generate(players, [3, 3], rankings=rankings)
    assert result.teams == {"T1": ["A", "D", "E"], "T2": ["B", "C", "F"]}


def test_seeded_snake_draft_skips_full_teams():
    players = ["A", "B", "C", "D", "E"]
    rankings = _rankings({"A": 5, "B": 4, "C": 3, "D": 2, "E": 1})
    result = _generate(players, [3, 2], rankings=rankings)
    assert result.teams == {"T1": ["A", "D", "E"], "T2": ["B", "C"]}


def test_seeded_ties_break_on_rating_then_name():
    rankings = _rankings({"A": 1, "B": 1})
    rankings.players["B"].rating = Rating(value=1100.0)
    result = _generate(["C", "A", "B", "D"], [2, 2], rankings=rankings)
    # B (higher rating) leads, then A; unranked C and D follow by name
    assert result.teams == {"T1": ["B", "D"], "T2": ["A", "C"]}


def test_newcomers_get_provisional_anchor_rating():
    rankings = _rankings({"A": 5, "B": 4}, rating=1200.0)
    rankings.players["B"].rating = Rating(value=1100.0)
    strengths = TeamGenerator().player_strengths(["A", "B", "New"], rankings)
    assert strengths["New"] == (0.0, pytest.approx(1100.0 * 0.99))
    assert strengths["A"] == (5.0, 1200.0)


def test_swap_search_breaks_up_repeated_pairs():
    players = ["A", "B", "C", "D"]
    rankings = _rankings({"A": 4, "B": 3, "C": 2, "D": 1})
    unweighted = _generate(players, [2, 2], rankings=rankings)
    assert unweighted.teams == {"T1": ["A", "D"], "T2": ["B", "C"]}

    history = TeammateHistory(pairs={pair_key("A", "D"): 3, pair_key("B", "C"): 3})
    weighted = _generate(players, [2, 2], rankings=rankings, history=history)
    teams = {frozenset(team) for team in weighted.teams.values()}
    assert teams == {frozenset({"A", "C"}), frozenset({"B", "D"})}


def test_swap_search_never_increases_repeat_weight():
    players = _players(15)
    rankings = _rankings({p: 30 - i for i, p in enumerate(players)})
    rng = random.Random(3)
    pairs = {}
    for _ in range(40):
        a, b = rng.sample(players, 2)
        pairs[pair_key(a, b)] = pairs.get(pair_key(a, b), 0) + 1
    history = TeammateHistory(pairs=pairs)

    before = _generate(players, [5, 5, 5], rankings=rankings)
    after = _generate(players, [5, 5, 5], rankings=rankings, history=history)

    weight_before = sum(history.pair_weight(t) for t in before.teams.values())
    weight_after = sum(history.pair_weight(t) for t in after.teams.values())
    assert weight_after <= weight_before
    assert [len(t) for t in after.teams.values()] == [5, 5, 5]


def test_draw_history_is_recorded_when_enabled():
    players = _players(10)
    result = _generate(players, [5, 5], record_history=True, date="2025-03-01")

    draw = result.draw_history
    assert draw is not None
    assert draw.date == "2025-03-01"
    assert len(draw.steps) == 10
    assert len(draw.pairs) == 2 * 10
    document = result.to_dict()["drawHistory"]
    assert document["steps"][0]["step"] == 1
    assert document["steps"][0]["fromPot"] == 1


def test_draw_history_absent_by_default():
    result = _generate(_players(10), [5, 5])
    assert result.draw_history is None
    assert "drawHistory" not in result.to_dict()


@pytest.mark.parametrize(
    "teams, sizes",
    [
        (2, [5, 4]),  # sum below player count
        (2, [6, 5]),  # sum above player count
        (2, [10, 0]),  # non-positive size
        (3, [5, 5]),  # count mismatch
    ],
)
def test_invalid_team_configuration_is_rejected(teams, sizes):
    generator = TeamGenerator()
    request = TeamGenerationRequest(
        players=_players(10), config=TeamConfig(teams=teams, team_sizes=sizes)
    )
    with pytest.raises(TeamConfigurationError):
        generator.generate(request)


def test_unknown_method_is_rejected():
    with pytest.raises(TeamConfigurationError):
        _generate(_players(4), [2, 2], method="alphabetical")


@pytest.mark.parametrize("players", [[], ["A", "A", "B", "C"], ["A", " ", "B", "C"]])
def test_invalid_player_pool_is_rejected(players):
    with pytest.raises(PlayerPoolError):
        _generate(players, [2, 2])


def test_calculate_configurations_respects_limits():
    assert [c.to_dict() for c in calculate_configurations(12)] == [
        {"teams": 2, "teamSizes": [6, 6]}
    ]
    assert [c.to_dict() for c in calculate_configurations(17)] == [
        {"teams": 3, "teamSizes": [6, 6, 5]}
    ]
    assert [c.teams for c in calculate_configurations(24)] == [4]
    assert calculate_configurations(8) == []


def test_generated_team_names_are_unique_colour_noun_pairs():
    names = generate_team_names(5, random.Random(1))
    assert len(set(names)) == 5
    assert all(len(name.split(" ")) == 2 for name in names)


def test_team_balance_reports_rating_gap():
    rankings = _rankings({"A": 1, "B": 1}, rating=1100.0)
    balance = team_balance({"T1": ["A", "B"], "T2": ["C", "D"]}, rankings)
    assert balance == {"teamRatings": {"T1": 1100.0, "T2": 1000.0}, "ratingDelta": 100.0}


class _Pool:
    def __init__(self, players, membership):
        self.players = players
        self.members = membership

    def eligible_players(self, date, league):
        return list(self.players)

    def membership(self, date, league):
        return dict(self.members)


def test_eligible_players_drops_waiting_list_and_caps_at_limit():
    pool = _Pool(_players(6), {"P02": "waiting"})
    settings = TeamGenerationSettings(player_limit=4)
    assert eligible_players(pool, "2025-03-01", "main", settings) == [
        "P01",
        "P03",
        "P04",
        "P05",
    ]


def test_eligible_players_rejects_empty_pool():
    with pytest.raises(PlayerPoolError):
        eligible_players(_Pool([], {}), "2025-03-01", "main")
