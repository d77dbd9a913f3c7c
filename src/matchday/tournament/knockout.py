"""Seeded single-elimination brackets.

The bracket size is the next power of two at or above the team count. Seeds
are placed so that seed 1 meets the lowest seed, and the missing seeds become
byes for the top seeds. Winners are written into the next round by position:
match ``i`` feeds match ``i // 2``, home side when ``i`` is even.
"""

# Matchday
# Copyright (C) 2025  Matchday developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import copy
from typing import Any, Dict, List, Optional, Sequence, Union

from matchday.constants import BYE, ROUND_FINAL, ROUND_NAMES, ROUND_OF_PREFIX
from matchday.exceptions import BracketStateError
from matchday.models.knockout import KnockoutBracket, KnockoutMatch
from matchday.models.standing import Standing
from matchday.utils import setup_logger
from matchday.utils.validation import validate_score, validate_scorers

logger = setup_logger(__name__)


def bracket_size(team_count: int) -> int:
    size = 1
    while size < team_count:
        size *= 2
    return size


def round_name(slots: int) -> str:
    """Name of the round played by ``slots`` teams."""
    return ROUND_NAMES.get(slots, f"{ROUND_OF_PREFIX}{slots}")


def round_names(size: int) -> List[str]:
    names = []
    slots = size
    while slots >= 2:
        names.append(round_name(slots))
        slots //= 2
    return names


def seed_positions(size: int) -> List[int]:
    """Seed numbers in bracket order, e.g. ``[1, 8, 4, 5, 2, 7, 3, 6]`` for 8."""
    positions = [1]
    while len(positions) < size:
        total = len(positions) * 2 + 1
        positions = [seed for s in positions for seed in (s, total - s)]
    return positions


def generate(seeded_teams: Sequence[str]) -> KnockoutBracket:
    """Build a bracket from teams in seed order (strongest first).

    Raises
    ------
    BracketStateError
        If fewer than two teams are given or names are blank or repeated.
    """
    teams = list(seeded_teams)
    if len(teams) < 2:
        raise BracketStateError(f"A knockout needs at least 2 teams, got {len(teams)}")
    if any(not isinstance(t, str) or not t.strip() or t == BYE for t in teams):
        raise BracketStateError("Team names must be non-empty and not reserved")
    if len(set(teams)) != len(teams):
        raise BracketStateError("Seeded team list contains duplicates")

    size = bracket_size(len(teams))
    names = round_names(size)
    positions = seed_positions(size)

    matches: List[KnockoutMatch] = []
    for i in range(size // 2):
        high, low = positions[2 * i], positions[2 * i + 1]
        home = teams[high - 1]
        if low > len(teams):
            matches.append(KnockoutMatch(round=names[0], match=i + 1, home=home, away=BYE, bye=True))
        else:
            matches.append(KnockoutMatch(round=names[0], match=i + 1, home=home, away=teams[low - 1]))

    slots = size // 2
    for name in names[1:]:
        matches.extend(KnockoutMatch(round=name, match=n + 1) for n in range(slots // 2))
        slots //= 2

    bracket = KnockoutBracket(teams=teams, bracket=matches)
    _advance(_rounds(bracket))
    logger.info(
        f"Generated {size}-slot bracket for {len(teams)} teams with {size - len(teams)} byes"
    )
    return bracket


def _rounds(bracket: KnockoutBracket) -> List[List[KnockoutMatch]]:
    """Group matches by round in play order, checking the bracket shape."""
    size = len(bracket.bracket) + 1
    if size < 2 or size & (size - 1):
        raise BracketStateError(f"Bracket has {len(bracket.bracket)} matches; not a full bracket")
    expected = round_names(size)
    unknown = set(bracket.round_names()) - set(expected)
    if unknown:
        raise BracketStateError(f"Unknown round names: {', '.join(sorted(map(str, unknown)))}")

    rounds = []
    slots = size
    for name in expected:
        matches = bracket.matches_in(name)
        if [m.match for m in matches] != list(range(1, slots // 2 + 1)):
            raise BracketStateError(f"Round {name!r} should have {slots // 2} numbered matches")
        rounds.append(matches)
        slots //= 2
    return rounds


def _validate_scores(rounds: List[List[KnockoutMatch]]) -> None:
    for matches in rounds:
        for m in matches:
            where = f"{m.round} match {m.match}"
            if not m.has_score:
                continue
            if m.bye:
                raise BracketStateError(f"A bye cannot be scored ({where})")
            if not m.is_resolved:
                raise BracketStateError(f"Scores set on an unresolved match ({where})")
            errors = []
            for side in ("home", "away"):
                score = getattr(m, f"{side}_score")
                result = validate_score(score, f"{side} score")
                if result:
                    result = validate_scorers(
                        getattr(m, f"{side}_scorers"), score, getattr(m, f"{side}_own_goals")
                    )
                errors.extend(result.errors)
            if errors:
                raise BracketStateError(f"Invalid scores ({where}): {', '.join(errors)}")


def _advance(rounds: List[List[KnockoutMatch]]) -> None:
    """Write each match's winner into the next round, clearing stale results."""
    for r in range(len(rounds) - 1):
        for i, match in enumerate(rounds[r]):
            winner = match.winner()
            target = rounds[r + 1][i // 2]
            side = "home" if i % 2 == 0 else "away"
            if getattr(target, side) != winner:
                logger.debug(
                    f"{target.round} match {target.match} {side}: "
                    f"{getattr(target, side)} -> {winner}"
                )
                setattr(target, side, winner)
                target.clear_scores()


def update_scores(bracket: Union[KnockoutBracket, Dict[str, Any]]) -> KnockoutBracket:
    """Advance winners through a bracket with edited scores.

    A strictly higher score advances; a bye always advances its team. Draws
    and unplayed matches leave the next slot unresolved.

    Raises
    ------
    BracketStateError
        For unknown rounds, wrong match counts, or invalid scores.
    """
    if isinstance(bracket, KnockoutBracket):
        updated = copy.deepcopy(bracket)
    else:
        updated = KnockoutBracket.from_dict(bracket)
    rounds = _rounds(updated)
    _validate_scores(rounds)
    _advance(rounds)

    for matches in rounds:
        for m in matches:
            if m.is_played and m.is_resolved and m.home_score == m.away_score:
                logger.warning(f"{m.round} match {m.match} is drawn; winner left unresolved")
    return updated


def champion(bracket: KnockoutBracket) -> Optional[str]:
    finals = bracket.matches_in(ROUND_FINAL)
    if not finals:
        return None
    return finals[0].winner()


def seed_from_standings(standings: Sequence[Standing]) -> List[str]:
    return [row.team for row in standings]
