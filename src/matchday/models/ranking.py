"""Ranking and rating records."""

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
from typing import Any, Dict, List, Optional, Tuple

from matchday.constants import RATING_BASELINE, SCHEMA_VERSION
from matchday.exceptions import RankingDataError


@dataclass
class Rating:
    """ELO-style rating of one player.

    Attributes:
        value: Current rating
        games_played: Number of rated matches
        last_decay_at: Date the inactivity decay was last applied
        deltas: One ``{date, phase, delta}`` entry per rated match
    """

    value: float = RATING_BASELINE
    games_played: int = 0
    last_decay_at: Optional[str] = None
    deltas: List[Dict[str, Any]] = field(default_factory=list)

    def copy(self) -> "Rating":
        return Rating(
            value=self.value,
            games_played=self.games_played,
            last_decay_at=self.last_decay_at,
            deltas=[dict(d) for d in self.deltas],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": round(self.value, 2),
            "gamesPlayed": self.games_played,
            "lastDecayAt": self.last_decay_at,
            "deltas": [dict(d) for d in self.deltas],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Rating":
        if not data:
            return cls()
        return cls(
            value=float(data.get("value", RATING_BASELINE)),
            games_played=int(data.get("gamesPlayed", 0)),
            last_decay_at=data.get("lastDecayAt"),
            deltas=list(data.get("deltas", [])),
        )


@dataclass
class SessionDetail:
    """What one player earned on one date.

    ``team`` is None for dates the player was tracked but did not play.
    """

    team: Optional[str] = None
    appearance_points: Optional[int] = None
    match_points: Optional[int] = None
    bonus_points: Optional[int] = None
    knockout_points: Optional[int] = None
    total_points: Optional[int] = None
    rating: Optional[int] = None
    league_winner: bool = False
    cup_winner: bool = False
    rank: Optional[int] = None
    ranking_points: Optional[float] = None
    total_players: Optional[int] = None

    @property
    def appeared(self) -> bool:
        return self.team is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team": self.team,
            "appearancePoints": self.appearance_points,
            "matchPoints": self.match_points,
            "bonusPoints": self.bonus_points,
            "knockoutPoints": self.knockout_points,
            "totalPoints": self.total_points,
            "rating": self.rating,
            "leagueWinner": self.league_winner,
            "cupWinner": self.cup_winner,
            "rank": self.rank,
            "rankingPoints": self.ranking_points,
            "totalPlayers": self.total_players,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionDetail":
        return cls(
            team=data.get("team"),
            appearance_points=data.get("appearancePoints"),
            match_points=data.get("matchPoints"),
            bonus_points=data.get("bonusPoints"),
            knockout_points=data.get("knockoutPoints"),
            total_points=data.get("totalPoints"),
            rating=data.get("rating", data.get("eloRating")),
            league_winner=bool(data.get("leagueWinner", False)),
            cup_winner=bool(data.get("cupWinner", False)),
            rank=data.get("rank"),
            ranking_points=data.get("rankingPoints"),
            total_players=data.get("totalPlayers"),
        )


@dataclass
class RankingRecord:
    """Season statistics of one player."""

    appearances: int = 0
    points: int = 0
    raw_average: float = 0.0
    weighted_average: float = 0.0
    ranking_points: float = 0.0
    pull_factor: float = 0.0
    has_full_confidence: bool = False
    games_until_full_confidence: int = 0
    rating: Rating = field(default_factory=Rating)
    last_appearance: Optional[str] = None
    league_wins: int = 0
    cup_wins: int = 0
    rank: Optional[int] = None
    previous_rank: Optional[int] = None
    rank_movement: int = 0
    is_new: bool = True
    ranking_detail: Dict[str, SessionDetail] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appearances": self.appearances,
            "points": self.points,
            "rawAverage": round(self.raw_average, 2),
            "weightedAverage": round(self.weighted_average, 2),
            "rankingPoints": round(self.ranking_points, 2),
            "pullFactor": round(self.pull_factor, 3),
            "hasFullConfidence": self.has_full_confidence,
            "gamesUntilFullConfidence": self.games_until_full_confidence,
            "rating": self.rating.to_dict(),
            "lastAppearance": self.last_appearance,
            "leagueWins": self.league_wins,
            "cupWins": self.cup_wins,
            "rank": self.rank,
            "previousRank": self.previous_rank,
            "rankMovement": self.rank_movement,
            "isNew": self.is_new,
            "rankingDetail": {
                date: detail.to_dict() for date, detail in sorted(self.ranking_detail.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingRecord":
        return cls(
            appearances=int(data["appearances"]),
            points=int(data["points"]),
            raw_average=float(data.get("rawAverage", 0.0)),
            weighted_average=float(data.get("weightedAverage", 0.0)),
            ranking_points=float(data.get("rankingPoints", 0.0)),
            pull_factor=float(data.get("pullFactor", 0.0)),
            has_full_confidence=bool(data.get("hasFullConfidence", False)),
            games_until_full_confidence=int(data.get("gamesUntilFullConfidence", 0)),
            rating=Rating.from_dict(data.get("rating")),
            last_appearance=data.get("lastAppearance"),
            league_wins=int(data.get("leagueWins", 0)),
            cup_wins=int(data.get("cupWins", 0)),
            rank=data.get("rank"),
            previous_rank=data.get("previousRank"),
            rank_movement=int(data.get("rankMovement", 0)),
            is_new=bool(data.get("isNew", True)),
            ranking_detail={
                date: SessionDetail.from_dict(detail)
                for date, detail in (data.get("rankingDetail") or {}).items()
            },
        )


@dataclass
class RankingTable:
    """Rankings of every tracked player for one season (or several, aggregated)."""

    season: Optional[str] = None
    players: Dict[str, RankingRecord] = field(default_factory=dict)
    calculated_dates: List[str] = field(default_factory=list)
    ranking_metadata: Dict[str, Any] = field(default_factory=dict)
    last_updated: Optional[str] = None
    version: int = SCHEMA_VERSION

    def ranked(self) -> List[Tuple[str, RankingRecord]]:
        """Players in rank order; unranked players last, by name."""
        return sorted(
            self.players.items(),
            key=lambda item: (item[1].rank is None, item[1].rank or 0, item[0]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "season": self.season,
            "lastUpdated": self.last_updated,
            "calculatedDates": list(self.calculated_dates),
            "players": {name: record.to_dict() for name, record in self.ranked()},
            "rankingMetadata": dict(self.ranking_metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingTable":
        """Deserialize a stored ranking table.

        Raises
        ------
        RankingDataError
            If the document is not a ranking table or a player entry is corrupt.
        """
        if not isinstance(data, dict) or not isinstance(data.get("players", {}), dict):
            raise RankingDataError("Ranking data is not a valid rankings document")
        players = {}
        for name, record in data.get("players", {}).items():
            try:
                players[name] = RankingRecord.from_dict(record)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise RankingDataError(f"Corrupt ranking entry for {name}: {exc}") from exc
        season = data.get("season")
        return cls(
            season=str(season) if season is not None else None,
            players=players,
            calculated_dates=list(data.get("calculatedDates", [])),
            ranking_metadata=dict(data.get("rankingMetadata", {})),
            last_updated=data.get("lastUpdated"),
            version=data.get("version", 1),
        )
