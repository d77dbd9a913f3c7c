"""Completed session input for the rankings engine."""

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

from matchday.constants import KNOCKOUT_GAMES_KEY
from matchday.exceptions import BracketStateError, RankingDataError, ScheduleStateError
from matchday.models.knockout import KnockoutBracket
from matchday.models.schedule import Match, decode_rounds


@dataclass
class SessionRecord:
    """Teams and results of one session date.

    Attributes:
        date: Session date (ISO format)
        teams: Team name -> player names
        rounds: League rounds
        knockout: Cup bracket, if one was played
    """

    date: str
    teams: Dict[str, List[str]] = field(default_factory=dict)
    rounds: List[List[Match]] = field(default_factory=list)
    knockout: Optional[KnockoutBracket] = None

    def league_matches(self) -> List[Match]:
        return [m for r in self.rounds for m in r]

    @property
    def has_results(self) -> bool:
        return any(m.is_complete for m in self.league_matches())

    @classmethod
    def from_dict(cls, data: Dict[str, Any], date: Optional[str] = None) -> "SessionRecord":
        """Deserialize a session.

        Accepts the flat form ``{date, teams, rounds, knockout}`` and the
        stored form ``{teams, games: {rounds, "knockout-games": {bracket}}}``.
        """
        if not isinstance(data, dict):
            raise RankingDataError(f"Session data for {date} is not an object")
        games = data.get("games") or {}
        rounds = data.get("rounds", games.get("rounds", []))
        knockout = data.get("knockout", games.get(KNOCKOUT_GAMES_KEY))
        session_date = data.get("date") or date
        if not session_date:
            raise RankingDataError("Session record has no date")
        try:
            return cls(
                date=session_date,
                teams={name: list(players) for name, players in (data.get("teams") or {}).items()},
                rounds=decode_rounds(rounds or []),
                knockout=KnockoutBracket.from_dict(knockout) if knockout else None,
            )
        except (ScheduleStateError, BracketStateError, TypeError, AttributeError) as exc:
            raise RankingDataError(f"Corrupt session data for {session_date}: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "teams": {name: list(players) for name, players in self.teams.items()},
            "rounds": [[m.to_dict() for m in r] for r in self.rounds],
            "knockout": self.knockout.to_dict() if self.knockout else None,
        }
