"""League schedule records."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from matchday.constants import SCHEMA_VERSION
from matchday.exceptions import ScheduleStateError
from matchday.type_hints import MaybeTeam, Scorers
from matchday.utils.validation import validate_score


@dataclass
class Match:
    """A league fixture between two teams.

    A bye match has one real team in ``home`` and ``bye`` set; it never
    carries a score.
    """

    home: MaybeTeam
    away: MaybeTeam
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    home_scorers: Scorers = field(default_factory=dict)
    away_scorers: Scorers = field(default_factory=dict)
    home_own_goals: int = 0
    away_own_goals: int = 0
    bye: bool = False

    @property
    def is_complete(self) -> bool:
        return not self.bye and self.home_score is not None and self.away_score is not None

    @property
    def bye_team(self) -> Optional[str]:
        if not self.bye:
            return None
        return self.home if self.home is not None else self.away

    def involves(self, team: str) -> bool:
        return team in (self.home, self.away)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "home": self.home,
            "away": self.away,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
            "homeScorers": dict(self.home_scorers),
            "awayScorers": dict(self.away_scorers),
            "homeOwnGoals": self.home_own_goals,
            "awayOwnGoals": self.away_own_goals,
            "bye": self.bye,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize a match, accepting the legacy ``{"bye": team}`` form."""
        if not isinstance(data, dict):
            raise ScheduleStateError(f"Malformed match entry: {data!r}")
        if isinstance(data.get("bye"), str):
            return cls(home=data["bye"], away=None, bye=True)
        for key in ("homeScore", "awayScore"):
            check = validate_score(data.get(key), key)
            if not check.is_valid:
                raise ScheduleStateError(check.error_message)
        return cls(
            home=data.get("home"),
            away=data.get("away"),
            home_score=data.get("homeScore"),
            away_score=data.get("awayScore"),
            home_scorers=dict(data.get("homeScorers") or {}),
            away_scorers=dict(data.get("awayScorers") or {}),
            home_own_goals=data.get("homeOwnGoals") or 0,
            away_own_goals=data.get("awayOwnGoals") or 0,
            bye=bool(data.get("bye", False)),
        )


def decode_rounds(rounds: Any) -> List[List[Match]]:
    """Decode a list of rounds, each a list of match dictionaries."""
    if not isinstance(rounds, list) or not all(isinstance(r, list) for r in rounds):
        raise ScheduleStateError("Rounds must be a list of lists of matches")
    return [[m if isinstance(m, Match) else Match.from_dict(m) for m in r] for r in rounds]


@dataclass
class ScheduleState:
    """Stored schedule for one league date.

    Attributes:
        rounds: Ordered rounds of matches
        anchor_index: Absolute rotation step the next round starts from
        team_count: Number of teams the schedule was generated for
        version: Record schema version
    """

    rounds: List[List[Match]] = field(default_factory=list)
    anchor_index: Any = 0
    team_count: int = 0
    version: int = SCHEMA_VERSION

    def matches(self) -> Iterator[Match]:
        for round_matches in self.rounds:
            yield from round_matches

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "rounds": [[m.to_dict() for m in r] for r in self.rounds],
            "anchorIndex": self.anchor_index,
            "teamCount": self.team_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleState":
        """Deserialize a stored schedule.

        Legacy documents without ``teamCount`` infer it from the teams
        appearing in the rounds; a missing ``anchorIndex`` decodes to None.
        """
        if not isinstance(data, dict):
            raise ScheduleStateError("Schedule document must be an object")
        rounds = decode_rounds(data.get("rounds", []))
        team_count = data.get("teamCount")
        if team_count is None:
            names = set()
            for r in rounds:
                for m in r:
                    names.update(t for t in (m.home, m.away) if t is not None)
            team_count = len(names)
        return cls(
            rounds=rounds,
            anchor_index=data.get("anchorIndex"),
            team_count=team_count,
            version=data.get("version", 1),
        )
