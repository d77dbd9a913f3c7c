"""Engine configuration data classes."""

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
from typing import Any, Dict

from matchday.constants import (
    ACTIVE_MIN_APPEARANCES,
    ACTIVE_WINDOW_MONTHS,
    APPEARANCE_POINTS,
    BONUS_MULTIPLIER,
    CONFIDENCE_FRACTION,
    DEFAULT_BALANCE_TOLERANCE,
    DEFAULT_HISTORY_WINDOW,
    DEFAULT_MAX_IMPROVING_SWAPS,
    DEFAULT_MAX_PLAYERS_PER_TEAM,
    DEFAULT_MAX_SWAP_EVALUATIONS,
    DEFAULT_MAX_TEAMS,
    DEFAULT_MIN_PLAYERS_PER_TEAM,
    DEFAULT_MIN_TEAMS,
    DEFAULT_PLAYER_LIMIT,
    KNOCKOUT_MULTIPLIER,
    PROVISIONAL_ANCHOR_FACTOR,
    PROVISIONAL_THRESHOLD,
    PULL_STRENGTH,
    RATING_BASELINE,
    RATING_DECAY_RATE,
    RATING_K_CUP,
    RATING_K_LEAGUE,
    RATING_SCALE,
)


@dataclass(frozen=True)
class TeamGenerationSettings:
    """League limits used to propose team configurations.

    Attributes
    ----------
    min_teams, max_teams : int
        Allowed number of teams.
    min_players_per_team, max_players_per_team : int
        Allowed team size.
    player_limit : int
        Maximum number of players taking part on one date.
    """

    min_teams: int = DEFAULT_MIN_TEAMS
    max_teams: int = DEFAULT_MAX_TEAMS
    min_players_per_team: int = DEFAULT_MIN_PLAYERS_PER_TEAM
    max_players_per_team: int = DEFAULT_MAX_PLAYERS_PER_TEAM
    player_limit: int = DEFAULT_PLAYER_LIMIT

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to dictionary."""
        return {
            "minTeams": self.min_teams,
            "maxTeams": self.max_teams,
            "minPlayersPerTeam": self.min_players_per_team,
            "maxPlayersPerTeam": self.max_players_per_team,
            "playerLimit": self.player_limit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamGenerationSettings":
        """Deserialize settings; accepts the nested ``teamGeneration`` block."""
        block = data.get("teamGeneration", data)
        return cls(
            min_teams=block.get("minTeams", DEFAULT_MIN_TEAMS),
            max_teams=block.get("maxTeams", DEFAULT_MAX_TEAMS),
            min_players_per_team=block.get("minPlayersPerTeam", DEFAULT_MIN_PLAYERS_PER_TEAM),
            max_players_per_team=block.get("maxPlayersPerTeam", DEFAULT_MAX_PLAYERS_PER_TEAM),
            player_limit=data.get("playerLimit", block.get("playerLimit", DEFAULT_PLAYER_LIMIT)),
        )


@dataclass(frozen=True)
class SwapSearchConfig:
    """Bounds for the teammate-repetition swap search after a seeded draft."""

    max_improving_swaps: int = DEFAULT_MAX_IMPROVING_SWAPS
    max_evaluations: int = DEFAULT_MAX_SWAP_EVALUATIONS
    balance_tolerance: float = DEFAULT_BALANCE_TOLERANCE


@dataclass(frozen=True)
class HistoryConfig:
    """Sliding window for teammate history."""

    window: int = DEFAULT_HISTORY_WINDOW


@dataclass(frozen=True)
class RatingConfig:
    """ELO-style rating parameters.

    Attributes
    ----------
    baseline : float
        Rating of a new player and the decay target.
    scale : float
        Rating difference giving 10:1 expected odds.
    k_league, k_cup : float
        Scaling factor applied to the surprise of league and cup matches.
    decay_rate : float
        Fraction of the distance to the baseline lost per whole week.
    provisional_threshold : int
        Appearances before a rating is fully trusted for seeding.
    """

    baseline: float = RATING_BASELINE
    scale: float = RATING_SCALE
    k_league: float = RATING_K_LEAGUE
    k_cup: float = RATING_K_CUP
    decay_rate: float = RATING_DECAY_RATE
    provisional_threshold: int = PROVISIONAL_THRESHOLD
    provisional_anchor_factor: float = PROVISIONAL_ANCHOR_FACTOR


@dataclass(frozen=True)
class RankingConfig:
    """Points and composite parameters for the rankings engine."""

    appearance_points: int = APPEARANCE_POINTS
    bonus_multiplier: int = BONUS_MULTIPLIER
    knockout_multiplier: int = KNOCKOUT_MULTIPLIER
    confidence_fraction: float = CONFIDENCE_FRACTION
    pull_strength: float = PULL_STRENGTH
    active_min_appearances: int = ACTIVE_MIN_APPEARANCES
    active_window_months: int = ACTIVE_WINDOW_MONTHS
    rating: RatingConfig = field(default_factory=RatingConfig)


@dataclass(frozen=True)
class EngineConfig:
    """Top-level configuration passed explicitly into each engine."""

    team_generation: TeamGenerationSettings = field(default_factory=TeamGenerationSettings)
    swap_search: SwapSearchConfig = field(default_factory=SwapSearchConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        rating = self.ranking.rating
        return {
            "teamGeneration": self.team_generation.to_dict(),
            "swapSearch": {
                "maxImprovingSwaps": self.swap_search.max_improving_swaps,
                "maxEvaluations": self.swap_search.max_evaluations,
                "balanceTolerance": self.swap_search.balance_tolerance,
            },
            "history": {"window": self.history.window},
            "ranking": {
                "appearancePoints": self.ranking.appearance_points,
                "bonusMultiplier": self.ranking.bonus_multiplier,
                "knockoutMultiplier": self.ranking.knockout_multiplier,
                "confidenceFraction": self.ranking.confidence_fraction,
                "pullStrength": self.ranking.pull_strength,
                "activeMinAppearances": self.ranking.active_min_appearances,
                "activeWindowMonths": self.ranking.active_window_months,
                "rating": {
                    "baseline": rating.baseline,
                    "scale": rating.scale,
                    "kLeague": rating.k_league,
                    "kCup": rating.k_cup,
                    "decayRate": rating.decay_rate,
                    "provisionalThreshold": rating.provisional_threshold,
                    "provisionalAnchorFactor": rating.provisional_anchor_factor,
                },
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Deserialize configuration; missing keys fall back to defaults."""
        swap = data.get("swapSearch", {})
        ranking = data.get("ranking", {})
        rating = ranking.get("rating", {})
        return cls(
            team_generation=TeamGenerationSettings.from_dict(data.get("teamGeneration", {})),
            swap_search=SwapSearchConfig(
                max_improving_swaps=swap.get("maxImprovingSwaps", DEFAULT_MAX_IMPROVING_SWAPS),
                max_evaluations=swap.get("maxEvaluations", DEFAULT_MAX_SWAP_EVALUATIONS),
                balance_tolerance=swap.get("balanceTolerance", DEFAULT_BALANCE_TOLERANCE),
            ),
            history=HistoryConfig(
                window=data.get("history", {}).get("window", DEFAULT_HISTORY_WINDOW)
            ),
            ranking=RankingConfig(
                appearance_points=ranking.get("appearancePoints", APPEARANCE_POINTS),
                bonus_multiplier=ranking.get("bonusMultiplier", BONUS_MULTIPLIER),
                knockout_multiplier=ranking.get("knockoutMultiplier", KNOCKOUT_MULTIPLIER),
                confidence_fraction=ranking.get("confidenceFraction", CONFIDENCE_FRACTION),
                pull_strength=ranking.get("pullStrength", PULL_STRENGTH),
                active_min_appearances=ranking.get(
                    "activeMinAppearances", ACTIVE_MIN_APPEARANCES
                ),
                active_window_months=ranking.get("activeWindowMonths", ACTIVE_WINDOW_MONTHS),
                rating=RatingConfig(
                    baseline=rating.get("baseline", RATING_BASELINE),
                    scale=rating.get("scale", RATING_SCALE),
                    k_league=rating.get("kLeague", RATING_K_LEAGUE),
                    k_cup=rating.get("kCup", RATING_K_CUP),
                    decay_rate=rating.get("decayRate", RATING_DECAY_RATE),
                    provisional_threshold=rating.get(
                        "provisionalThreshold", PROVISIONAL_THRESHOLD
                    ),
                    provisional_anchor_factor=rating.get(
                        "provisionalAnchorFactor", PROVISIONAL_ANCHOR_FACTOR
                    ),
                ),
            ),
        )
