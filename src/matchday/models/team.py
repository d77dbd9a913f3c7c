"""Team generation records."""

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

from matchday.exceptions import TeamConfigurationError
from matchday.utils import team_pairs


@dataclass
class TeamConfig:
    """Requested team layout.

    Attributes:
        teams: Number of teams
        team_sizes: Size of each team, in team order
    """

    teams: int
    team_sizes: List[int] = field(default_factory=list)

    @property
    def total_players(self) -> int:
        return sum(self.team_sizes)

    def to_dict(self) -> Dict[str, Any]:
        return {"teams": self.teams, "teamSizes": list(self.team_sizes)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TeamConfig":
        if not isinstance(data, dict):
            raise TeamConfigurationError("Team configuration is required")
        sizes = data.get("teamSizes")
        if not isinstance(sizes, list):
            raise TeamConfigurationError("Team configuration must include teamSizes")
        return cls(teams=data.get("teams"), team_sizes=list(sizes))


@dataclass
class DrawStep:
    """One pick of a recorded drawing, kept for replay."""

    step: int
    player: str
    to_team: str
    from_pot: Optional[int] = None
    pot_players_remaining: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "player": self.player,
            "fromPot": self.from_pot,
            "toTeam": self.to_team,
            "potPlayersRemaining": self.pot_players_remaining,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrawStep":
        return cls(
            step=data["step"],
            player=data["player"],
            to_team=data["toTeam"],
            from_pot=data.get("fromPot"),
            pot_players_remaining=data.get("potPlayersRemaining"),
        )


@dataclass
class DrawRecord:
    """A single recorded drawing of teams.

    Attributes:
        date: Session date (ISO format)
        method: Generation method used
        teams: Team name -> ordered player names
        steps: Pick-by-pick draw steps
    """

    date: str
    method: str
    teams: Dict[str, List[str]]
    steps: List[DrawStep] = field(default_factory=list)

    @property
    def pairs(self) -> List[List[str]]:
        """Sorted teammate pairs produced by this drawing."""
        result = []
        for players in self.teams.values():
            result.extend(sorted(pair) for pair in team_pairs(players))
        return sorted(result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "method": self.method,
            "teams": {name: list(players) for name, players in self.teams.items()},
            "pairs": self.pairs,
            "steps": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], date: Optional[str] = None) -> "DrawRecord":
        """Deserialize a draw record; ``date`` fills in records stored without one."""
        teams = data["teams"]
        if not isinstance(teams, dict):
            raise ValueError("Draw record teams must be a mapping")
        return cls(
            date=data.get("date") or date,
            method=data.get("method", "seeded"),
            teams={name: list(players) for name, players in teams.items()},
            steps=[DrawStep.from_dict(s) for s in data.get("steps", [])],
        )


@dataclass
class TeamGenerationResult:
    """Generated teams plus the summary returned to callers."""

    teams: Dict[str, List[str]]
    method: str
    total_players: int
    draw_history: Optional[DrawRecord] = None

    @property
    def players_used(self) -> int:
        return sum(len(players) for players in self.teams.values())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "teams": {name: list(players) for name, players in self.teams.items()},
            "config": {
                "method": self.method,
                "teams": len(self.teams),
                "totalPlayers": self.total_players,
                "playersUsed": self.players_used,
            },
        }
        if self.draw_history is not None:
            result["drawHistory"] = self.draw_history.to_dict()
        return result
