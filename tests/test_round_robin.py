import pytest

from matchday.exceptions import ScheduleStateError
from matchday.models.schedule import Match, ScheduleState
from matchday.scheduling import round_robin


def _teams(count):
    return [f"Team {chr(ord('A') + i)}" for i in range(count)]


def _pairs(rounds):
    return [frozenset((m.home, m.away)) for r in rounds for m in r if not m.bye]


def _scored(state):
    """Give every real fixture of the first round a 2-1 result."""
    edits = [[{"homeScore": 2, "awayScore": 1} if not m.bye else {} for m in state.rounds[0]]]
    return round_robin.apply_score_updates(state, edits)


def test_four_teams_full_cycle():
    state = round_robin.generate(_teams(4))

    assert len(state.rounds) == 3
    assert all(len(r) == 2 for r in state.rounds)
    pairs = _pairs(state.rounds)
    assert len(pairs) == 6
    assert len(set(pairs)) == 6
    assert state.anchor_index == 3
    assert state.team_count == 4


def test_five_teams_full_cycle_with_byes():
    state = round_robin.generate(_teams(5))

    assert len(state.rounds) == 5
    for r in state.rounds:
        assert sum(1 for m in r if m.bye) == 1
        assert sum(1 for m in r if not m.bye) == 2
        assert r[-1].bye
    pairs = _pairs(state.rounds)
    assert len(pairs) == 10
    assert len(set(pairs)) == 10
    byes = [m.bye_team for r in state.rounds for m in r if m.bye]
    assert sorted(byes) == _teams(5)


@pytest.mark.parametrize("count", range(2, 11))
def test_every_team_plays_once_per_round_and_never_itself(count):
    teams = _teams(count)
    state = round_robin.generate(teams)
    for r in state.rounds:
        seen = []
        for m in r:
            assert m.home != m.away
            seen.extend(t for t in (m.home, m.away) if t is not None)
        assert sorted(seen) == sorted(teams)
    assert len(set(_pairs(state.rounds))) == count * (count - 1) // 2


@pytest.mark.parametrize("count", [0, 1])
def test_too_few_teams_give_no_fixtures(count):
    state = round_robin.generate(_teams(count))
    assert state.rounds == []


@pytest.mark.parametrize("count", [4, 5, 6, 7])
def test_add_more_never_repeats_until_all_pairs_scheduled(count):
    teams = _teams(count)
    state = round_robin.generate(teams, rounds=1)
    while len(state.rounds) < round_robin.rounds_per_cycle(count):
        state = round_robin.add_more(state, teams, rounds=1)
        pairs = _pairs(state.rounds)
        assert len(pairs) == len(set(pairs))
    assert len(set(_pairs(state.rounds))) == count * (count - 1) // 2


def test_add_more_keeps_existing_rounds_and_advances_anchor():
    teams = _teams(4)
    first = _scored(round_robin.generate(teams))
    extended = round_robin.add_more(first, teams)

    assert len(extended.rounds) == 6
    assert extended.anchor_index == 6
    assert extended.rounds[0][0].home_score == 2
    assert first.anchor_index == 3


def test_second_cycle_reverses_home_and_away():
    teams = _teams(4)
    state = round_robin.add_more(round_robin.generate(teams), teams)
    first_leg = {(m.home, m.away) for r in state.rounds[:3] for m in r}
    second_leg = {(m.away, m.home) for r in state.rounds[3:] for m in r}
    assert first_leg == second_leg


def test_fixed_team_alternates_home_and_away():
    state = round_robin.generate(_teams(4))
    assert [r[0].home == "Team A" for r in state.rounds] == [True, False, True]


@pytest.mark.parametrize("anchor", [None, -1, "3", 1.5, True])
def test_add_more_rejects_bad_anchor(anchor):
    state = ScheduleState(rounds=[], anchor_index=anchor, team_count=4)
    with pytest.raises(ScheduleStateError):
        round_robin.add_more(state, _teams(4))


def test_add_more_rejects_changed_team_count():
    state = round_robin.generate(_teams(4))
    with pytest.raises(ScheduleStateError):
        round_robin.add_more(state, _teams(5))


def test_legacy_document_without_anchor_cannot_be_extended():
    document = {
        "rounds": [
            [{"home": "Team A", "away": "Team B"}, {"bye": "Team C"}],
        ]
    }
    state = ScheduleState.from_dict(document)
    assert state.anchor_index is None
    assert state.team_count == 3
    assert state.rounds[0][1] == Match(home="Team C", away=None, bye=True)
    with pytest.raises(ScheduleStateError):
        round_robin.add_more(state, _teams(3))


def test_score_updates_merge_by_position():
    teams = {"Team A": ["a1", "a2"], "Team B": ["b1", "b2"], "Team C": [], "Team D": []}
    state = round_robin.generate(list(teams))
    match = state.rounds[0][0]
    edits = [
        [
            {
                "home": match.home,
                "away": match.away,
                "homeScore": 2,
                "awayScore": 1,
                "homeScorers": {"a1": 2},
                "awayOwnGoals": 1,
            }
        ]
    ]
    match_teams = (match.home, match.away)
    assert match_teams == ("Team A", "Team D")

    rosters = {**teams, "Team D": ["d1"]}
    updated = round_robin.apply_score_updates(state, edits, rosters)
    scored = updated.rounds[0][0]
    assert (scored.home_score, scored.away_score) == (2, 1)
    assert scored.home_scorers == {"a1": 2}
    assert scored.away_own_goals == 1
    assert updated.rounds[0][1] == state.rounds[0][1]
    assert state.rounds[0][0].home_score is None


def test_partial_edit_keeps_other_fields():
    state = _scored(round_robin.generate(_teams(4)))
    updated = round_robin.apply_score_updates(state, [[{"awayScore": 2}]])
    assert (updated.rounds[0][0].home_score, updated.rounds[0][0].away_score) == (2, 2)


@pytest.mark.parametrize(
    "edit",
    [
        {"home": "Team B"},
        {"homeScore": -1, "awayScore": 0},
        {"homeScore": "2", "awayScore": 0},
        {"homeScore": 1, "awayScore": 0, "homeScorers": {"x": 2}},
        {"homeScore": 1, "awayScore": 0, "homeScorers": {"x": 0}},
        {"homeScore": 3, "awayScore": 0, "homeOwnGoals": 3},
        {"homeScorers": {"x": 1}},
    ],
)
def test_invalid_score_updates_are_rejected(edit):
    state = round_robin.generate(_teams(4))
    with pytest.raises(ScheduleStateError):
        round_robin.apply_score_updates(state, [[edit]])


def test_scorers_must_belong_to_the_team():
    teams = {"Team A": ["a1"], "Team B": ["b1"], "Team C": ["c1"], "Team D": ["d1"]}
    state = round_robin.generate(list(teams))
    with pytest.raises(ScheduleStateError):
        round_robin.apply_score_updates(
            state, [[{"homeScore": 1, "awayScore": 0, "homeScorers": {"b1": 1}}]], teams
        )


def test_unknown_position_is_rejected():
    state = round_robin.generate(_teams(4))
    with pytest.raises(ScheduleStateError):
        round_robin.apply_score_updates(state, [[{}, {}, {"homeScore": 1}]])


def test_bye_cannot_be_scored():
    state = round_robin.generate(_teams(3))
    bye_index = len(state.rounds[0]) - 1
    edits = [[{} for _ in range(bye_index)] + [{"homeScore": 1}]]
    with pytest.raises(ScheduleStateError):
        round_robin.apply_score_updates(state, edits)


def test_schedule_status_counts_real_fixtures():
    state = round_robin.generate(_teams(5))
    assert round_robin.schedule_status(state) == {
        "isComplete": False,
        "playedGames": 0,
        "totalGames": 10,
    }
    scored = _scored(state)
    assert round_robin.schedule_status(scored)["playedGames"] == 2
    assert len(round_robin.completed_matches(scored)) == 2


def test_state_survives_serialisation():
    state = _scored(round_robin.generate(_teams(5)))
    assert ScheduleState.from_dict(state.to_dict()) == state
