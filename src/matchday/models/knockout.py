"""Knockout bracket records."""

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
from typing import Any, Dict, List, Optional

from matchday.constants import BYE, SCHEMA_VERSION
from matchday.exceptions import BracketStateError
from matchday.type_hints import MaybeTeam, Scorers
from matchday.utils.validation import validate_score


@dataclass
class KnockoutMatch:
    """One match of a single-elimination bracket.

    Attributes:
        round: Round name (``final``, ``semi``, ``quarter`` or ``round-of-N``)
        match: 1-based index within the round
        home: Team name, ``"BYE"``, or None while unresolved
        away: Team name, ``"BYE"``, or None while unresolved
        bye: Whether one side is a bye
    """

    round: str
    match: int
    home: MaybeTeam = None
    away: MaybeTeam = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    home_scorers: Scorers = field(default_factory=dict)
    away_scorers: Scorers = field(default_factory=dict)
    home_own_goals: int = 0
    away_own_goals: int = 0
    bye: bool = False

    @property
    def is_resolved(self) -> bool:
        return self.home is not None and self.away is not None

    @property
    def has_score(self) -> bool:
        return self.home_score is not None or self.away_score is not None

    @property
    def is_played(self) -> bool:
        return not self.bye and self.home_score is not None and self.away_score is not None

    def winner(self) -> Optional[str]:
        """Team advancing from this match, or None when undecided."""
        if self.bye:
            return self.away if self.home == BYE else self.home
        if not self.is_resolved or not self.is_played:
            return None
        if self.home_score > self.away_score:
            return self.home
        if self.away_score > self.home_score:
            return self.away
        return None

    def clear_scores(self) -> None:
        self.home_score = None
        self.away_score = None
        self.home_scorers = {}
        self.away_scorers = {}
        self.home_own_goals = 0
        self.away_own_goals = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "match": self.match,
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
    def from_dict(cls, data: Dict[str, Any]) -> "KnockoutMatch":
        if not isinstance(data, dict) or "round" not in data or "match" not in data:
            raise BracketStateError(f"Malformed knockout match: {data!r}")
        for key in ("homeScore", "awayScore"):
            check = validate_score(data.get(key), key)
            if not check.is_valid:
                raise BracketStateError(check.error_message)
        return cls(
            round=data["round"],
            match=data["match"],
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


@dataclass
class KnockoutBracket:
    """A seeded bracket: teams in seed order plus every match of every round."""

    teams: List[str] = field(default_factory=list)
    bracket: List[KnockoutMatch] = field(default_factory=list)
    version: int = SCHEMA_VERSION

    @property
    def in_progress(self) -> bool:
        """True once any real match carries a score."""
        return any(m.has_score for m in self.bracket if not m.bye)

    def round_names(self) -> List[str]:
        names: List[str] = []
        for m in self.bracket:
            if m.round not in names:
                names.append(m.round)
        return names

    def matches_in(self, round_name: str) -> List[KnockoutMatch]:
        return sorted((m for m in self.bracket if m.round == round_name), key=lambda m: m.match)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "teams": list(self.teams),
            "bracket": [m.to_dict() for m in self.bracket],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnockoutBracket":
        """Deserialize a bracket; accepts the stored ``knockout-games`` wrapper."""
        if not isinstance(data, dict):
            raise BracketStateError("Bracket document must be an object")
        bracket = data.get("bracket")
        if not isinstance(bracket, list):
            raise BracketStateError("Bracket must be a list of matches")
        return cls(
            teams=list(data.get("teams") or []),
            bracket=[KnockoutMatch.from_dict(m) for m in bracket],
            version=data.get("version", 1),
        )
