"""Round-robin fixtures with the circle method.

The anchor index is an absolute rotation step. Step ``s`` is rotation
``s mod (m - 1)`` of cycle ``s // (m - 1)``, where ``m`` is the slot count
(teams plus a bye slot when the count is odd). Odd cycles are the return leg
and swap home and away, so a schedule can be extended indefinitely from the
stored anchor without repeating a pair before every pair has been played.
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
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from matchday.exceptions import ScheduleStateError
from matchday.models.schedule import Match, ScheduleState
from matchday.utils import setup_logger
from matchday.utils.validation import validate_score, validate_scorers

logger = setup_logger(__name__)

_SCORE_FIELDS = {
    "homeScore": "home_score",
    "awayScore": "away_score",
    "homeScorers": "home_scorers",
    "awayScorers": "away_scorers",
    "homeOwnGoals": "home_own_goals",
    "awayOwnGoals": "away_own_goals",
}


def _validate_teams(teams: Sequence[str]) -> List[str]:
    names = list(teams)
    if any(not isinstance(t, str) or not t.strip() for t in names):
        raise ScheduleStateError("Team names must be non-empty strings")
    if len(set(names)) != len(names):
        raise ScheduleStateError("Team names must be unique")
    return names


def _is_step(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def rounds_per_cycle(team_count: int) -> int:
    """Rounds needed to play every pair once."""
    if team_count < 2:
        return 0
    return team_count if team_count % 2 else team_count - 1


def round_at(teams: Sequence[str], step: int) -> List[Match]:
    """Fixtures of absolute rotation ``step``; bye matches come last."""
    slots: List[Optional[str]] = list(teams)
    if len(slots) % 2:
        slots.append(None)
    size = len(slots)
    rotation = step % (size - 1)
    second_leg = (step // (size - 1)) % 2 == 1

    rest = slots[1:]
    if rotation:
        rest = rest[-rotation:] + rest[:-rotation]
    circle = [slots[0]] + rest

    matches = []
    byes = []
    for i in range(size // 2):
        home, away = circle[i], circle[size - 1 - i]
        # the fixed slot alternates home and away
        if i == 0 and rotation % 2:
            home, away = away, home
        if second_leg:
            home, away = away, home
        if home is None or away is None:
            byes.append(Match(home=home if home is not None else away, away=None, bye=True))
        else:
            matches.append(Match(home=home, away=away))
    return matches + byes


def generate(
    teams: Sequence[str], anchor_index: int = 0, rounds: Optional[int] = None
) -> ScheduleState:
    """Generate ``rounds`` rounds starting at rotation step ``anchor_index``.

    ``rounds`` defaults to one full cycle. Zero or one team yields no fixtures.
    """
    names = _validate_teams(teams)
    if not _is_step(anchor_index):
        raise ScheduleStateError(f"Invalid anchor index: {anchor_index!r}")
    if rounds is not None and (not _is_step(rounds) or rounds == 0):
        raise ScheduleStateError(f"Round count must be a positive integer: {rounds!r}")

    if len(names) < 2:
        logger.info(f"Not enough teams for a schedule ({len(names)})")
        return ScheduleState(rounds=[], anchor_index=anchor_index, team_count=len(names))

    count = rounds if rounds is not None else rounds_per_cycle(len(names))
    generated = [round_at(names, anchor_index + n) for n in range(count)]
    logger.info(
        f"Generated {count} rounds for {len(names)} teams from anchor {anchor_index}"
    )
    return ScheduleState(
        rounds=generated, anchor_index=anchor_index + count, team_count=len(names)
    )


def add_more(
    state: ScheduleState, teams: Sequence[str], rounds: Optional[int] = None
) -> ScheduleState:
    """Append rounds to ``state``, resuming the rotation at its stored anchor.

    Raises
    ------
    ScheduleStateError
        If the anchor is missing or invalid, or the team count changed.
    """
    names = _validate_teams(teams)
    if state.anchor_index is None:
        raise ScheduleStateError("Schedule has no rotation anchor; regenerate it first")
    if not _is_step(state.anchor_index):
        raise ScheduleStateError(f"Corrupt rotation anchor: {state.anchor_index!r}")
    if state.team_count != len(names):
        raise ScheduleStateError(
            f"Schedule was generated for {state.team_count} teams, now {len(names)}"
        )

    extension = generate(names, state.anchor_index, rounds)
    logger.info(f"Added {len(extension.rounds)} rounds; next anchor {extension.anchor_index}")
    return ScheduleState(
        rounds=copy.deepcopy(state.rounds) + extension.rounds,
        anchor_index=extension.anchor_index,
        team_count=len(names),
        version=state.version,
    )


def _edit_fields(edit: Union[Match, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(edit, Match):
        edit = edit.to_dict()
    if not isinstance(edit, Mapping):
        raise ScheduleStateError(f"Malformed match edit: {edit!r}")
    return dict(edit)


def apply_score_updates(
    state: ScheduleState,
    edited_rounds: Sequence[Sequence[Union[Match, Mapping[str, Any]]]],
    teams: Optional[Mapping[str, Sequence[str]]] = None,
) -> ScheduleState:
    """Merge scores, scorers and own goals into ``state`` by fixture position.

    Only score fields present in an edit are changed; fixture membership
    never is. When ``teams`` rosters are given, scorers must belong to the
    side they scored for.
    """
    if not isinstance(edited_rounds, (list, tuple)):
        raise ScheduleStateError("Edited rounds must be a list")
    updated = copy.deepcopy(state)

    for round_index, edited in enumerate(edited_rounds):
        if not isinstance(edited, (list, tuple)):
            raise ScheduleStateError(f"Round {round_index + 1} must be a list of matches")
        for match_index, edit in enumerate(edited):
            try:
                match = updated.rounds[round_index][match_index]
            except IndexError:
                raise ScheduleStateError(
                    f"No fixture at round {round_index + 1}, match {match_index + 1}"
                ) from None
            _merge(match, _edit_fields(edit), teams, round_index, match_index)

    return updated


def _merge(
    match: Match,
    fields: Dict[str, Any],
    teams: Optional[Mapping[str, Sequence[str]]],
    round_index: int,
    match_index: int,
) -> None:
    where = f"round {round_index + 1}, match {match_index + 1}"
    legacy_bye = isinstance(fields.get("bye"), str)
    for side in ("home", "away"):
        if side in fields and not legacy_bye and fields[side] != getattr(match, side):
            raise ScheduleStateError(f"Fixture membership cannot change ({where})")

    changes = {attr: fields[key] for key, attr in _SCORE_FIELDS.items() if key in fields}
    if match.bye:
        if changes.get("home_score") is not None or changes.get("away_score") is not None:
            raise ScheduleStateError(f"A bye cannot be scored ({where})")
        return

    merged = {attr: changes.get(attr, getattr(match, attr)) for attr in _SCORE_FIELDS.values()}
    merged["home_scorers"] = dict(merged["home_scorers"] or {})
    merged["away_scorers"] = dict(merged["away_scorers"] or {})
    merged["home_own_goals"] = merged["home_own_goals"] or 0
    merged["away_own_goals"] = merged["away_own_goals"] or 0

    errors = []
    for side in ("home", "away"):
        score = merged[f"{side}_score"]
        result = validate_score(score, f"{side} score")
        if not result:
            errors.extend(result.errors)
            continue
        roster = teams.get(getattr(match, side)) if teams is not None else None
        result = validate_scorers(
            merged[f"{side}_scorers"], score, merged[f"{side}_own_goals"], roster
        )
        errors.extend(result.errors)
    if errors:
        raise ScheduleStateError(f"Invalid score update ({where}): {', '.join(errors)}")

    for attr, value in merged.items():
        setattr(match, attr, value)


def completed_matches(state: ScheduleState) -> List[Match]:
    return [m for m in state.matches() if m.is_complete]


def schedule_status(state: ScheduleState) -> Dict[str, Any]:
    """Played and total real fixtures."""
    total = sum(1 for m in state.matches() if not m.bye)
    played = len(completed_matches(state))
    return {"isComplete": total > 0 and played == total, "playedGames": played, "totalGames": total}
