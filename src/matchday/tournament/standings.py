"""League table computation."""

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

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from matchday.constants import DRAW_POINTS, LOSS_POINTS, WIN_POINTS
from matchday.models.schedule import Match
from matchday.models.standing import Standing

MatchInput = Union[Match, Mapping[str, Any], Sequence[Any]]


def _iter_matches(matches: Iterable[MatchInput]) -> Iterable[Match]:
    """Accept matches, match dictionaries, or rounds of either."""
    for item in matches:
        if isinstance(item, (list, tuple)):
            yield from _iter_matches(item)
        elif isinstance(item, Match):
            yield item
        else:
            yield Match.from_dict(item)


def calculate(
    matches: Iterable[MatchInput], teams: Optional[Sequence[str]] = None
) -> List[Standing]:
    """Reduce played matches to a sorted league table.

    Only matches with both scores count; byes never do. With ``teams``
    given, every listed team gets a row even before it has played.
    """
    table: Dict[str, Standing] = {}
    for team in teams or []:
        table[team] = Standing(team=team)

    for match in _iter_matches(matches):
        if not match.is_complete or match.home is None or match.away is None:
            continue
        home = table.setdefault(match.home, Standing(team=match.home))
        away = table.setdefault(match.away, Standing(team=match.away))
        _record(home, match.home_score, match.away_score)
        _record(away, match.away_score, match.home_score)

    return sorted(table.values(), key=Standing.sort_key)


def _record(row: Standing, scored: int, conceded: int) -> None:
    row.played += 1
    row.goals_for += scored
    row.goals_against += conceded
    if scored > conceded:
        row.won += 1
        row.points += WIN_POINTS
    elif scored == conceded:
        row.drawn += 1
        row.points += DRAW_POINTS
    else:
        row.lost += 1
        row.points += LOSS_POINTS


def league_winner(matches: Iterable[MatchInput]) -> Optional[str]:
    """Top of the table, or None when nothing has been played."""
    table = calculate(matches)
    return table[0].team if table else None


def seeding(matches: Iterable[MatchInput], teams: Optional[Sequence[str]] = None) -> List[str]:
    """Team names in table order, for seeding a knockout bracket."""
    return [row.team for row in calculate(matches, teams)]
