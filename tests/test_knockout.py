import pytest

from matchday.constants import BYE
from matchday.exceptions import BracketStateError
from matchday.models.knockout import KnockoutBracket
from matchday.models.standing import Standing
from matchday.tournament import knockout


def _seeds(count):
    return [f"S{i}" for i in range(1, count + 1)]


def _match(bracket, round_name, number):
    return bracket.matches_in(round_name)[number - 1]


def _score(bracket, round_name, number, home, away):
    match = _match(bracket, round_name, number)
    match.home_score = home
    match.away_score = away
    return bracket


def test_seed_positions_follow_standard_seeding():
    assert knockout.seed_positions(2) == [1, 2]
    assert knockout.seed_positions(4) == [1, 4, 2, 3]
    assert knockout.seed_positions(8) == [1, 8, 4, 5, 2, 7, 3, 6]


@pytest.mark.parametrize(
    "count, size, first_round",
    [(2, 2, "final"), (3, 4, "semi"), (5, 8, "quarter"), (8, 8, "quarter"), (9, 16, "round-of-16")],
)
def test_bracket_size_and_round_names(count, size, first_round):
    bracket = knockout.generate(_seeds(count))
    assert len(bracket.bracket) == size - 1
    assert bracket.round_names()[0] == first_round
    assert bracket.round_names()[-1] == "final"
    assert sum(1 for m in bracket.bracket if m.bye) == size - count


def test_five_teams_give_byes_to_top_three_seeds():
    bracket = knockout.generate(_seeds(5))

    quarters = bracket.matches_in("quarter")
    assert [(m.home, m.away, m.bye) for m in quarters] == [
        ("S1", BYE, True),
        ("S4", "S5", False),
        ("S2", BYE, True),
        ("S3", BYE, True),
    ]
    semis = bracket.matches_in("semi")
    assert (semis[0].home, semis[0].away) == ("S1", None)
    assert (semis[1].home, semis[1].away) == ("S2", "S3")
    final = _match(bracket, "final", 1)
    assert (final.home, final.away) == (None, None)


def test_strictly_higher_score_advances():
    bracket = _score(knockout.generate(_seeds(5)), "quarter", 2, 3, 1)
    updated = knockout.update_scores(bracket)
    assert _match(updated, "semi", 1).away == "S4"

    bracket = _score(knockout.generate(_seeds(5)), "quarter", 2, 1, 2)
    updated = knockout.update_scores(bracket)
    assert _match(updated, "semi", 1).away == "S5"


def test_draw_leaves_slot_unresolved():
    bracket = _score(knockout.generate(_seeds(5)), "quarter", 2, 1, 1)
    updated = knockout.update_scores(bracket)
    assert _match(updated, "semi", 1).away is None


def test_changed_result_clears_downstream_scores():
    bracket = _score(knockout.generate(_seeds(5)), "quarter", 2, 3, 1)
    bracket = knockout.update_scores(bracket)
    bracket = knockout.update_scores(_score(bracket, "semi", 1, 2, 0))
    assert _match(bracket, "final", 1).home == "S1"

    bracket = knockout.update_scores(_score(bracket, "quarter", 2, 1, 3))
    semi = _match(bracket, "semi", 1)
    assert semi.away == "S5"
    assert (semi.home_score, semi.away_score) == (None, None)
    assert _match(bracket, "final", 1).home is None


def test_update_does_not_mutate_input():
    bracket = _score(knockout.generate(_seeds(4)), "semi", 1, 1, 0)
    knockout.update_scores(bracket)
    assert _match(bracket, "final", 1).home is None


def test_full_tournament_crowns_champion():
    bracket = knockout.generate(_seeds(4))
    assert knockout.champion(bracket) is None
    bracket = _score(bracket, "semi", 1, 2, 0)
    bracket = knockout.update_scores(_score(bracket, "semi", 2, 0, 1))
    final = _match(bracket, "final", 1)
    assert (final.home, final.away) == ("S1", "S3")
    bracket = knockout.update_scores(_score(bracket, "final", 1, 0, 2))
    assert knockout.champion(bracket) == "S3"


def test_update_accepts_wire_document():
    document = _score(knockout.generate(_seeds(2)), "final", 1, 4, 2).to_dict()
    updated = knockout.update_scores(document)
    assert knockout.champion(updated) == "S1"
    assert KnockoutBracket.from_dict(updated.to_dict()) == updated


@pytest.mark.parametrize("teams", [[], ["S1"], ["S1", "S1"], ["S1", ""], ["S1", BYE]])
def test_generate_rejects_bad_team_lists(teams):
    with pytest.raises(BracketStateError):
        knockout.generate(teams)


def test_unknown_round_name_is_rejected():
    bracket = knockout.generate(_seeds(4))
    bracket.bracket[0].round = "eighth"
    with pytest.raises(BracketStateError):
        knockout.update_scores(bracket)


def test_missing_match_is_rejected():
    bracket = knockout.generate(_seeds(4))
    del bracket.bracket[1]
    with pytest.raises(BracketStateError):
        knockout.update_scores(bracket)


def test_scores_on_unresolved_match_are_rejected():
    bracket = _score(knockout.generate(_seeds(4)), "final", 1, 1, 0)
    with pytest.raises(BracketStateError):
        knockout.update_scores(bracket)


def test_negative_scores_are_rejected():
    bracket = _score(knockout.generate(_seeds(4)), "semi", 1, -1, 0)
    with pytest.raises(BracketStateError):
        knockout.update_scores(bracket)


def test_malformed_document_is_rejected():
    with pytest.raises(BracketStateError):
        knockout.update_scores({"teams": [], "bracket": [{"home": "S1"}]})


def test_in_progress_only_counts_real_matches():
    bracket = knockout.generate(_seeds(3))
    assert not bracket.in_progress
    assert _score(bracket, "semi", 2, 1, 0).in_progress


def test_seed_from_standings_keeps_table_order():
    rows = [Standing(team="B", points=6), Standing(team="A", points=3)]
    assert knockout.seed_from_standings(rows) == ["B", "A"]
