"""Validation utilities for Matchday.

This module provides reusable validation functions with consistent error handling.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from matchday.constants import MAX_OWN_GOALS
from matchday.exceptions import PlayerPoolError, TeamConfigurationError


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        errors: Human-readable error messages if invalid
    """

    def __init__(self, is_valid: bool, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    @property
    def error_message(self) -> str:
        return ", ".join(self.errors)

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return "ValidationResult(VALID)"
        return f"ValidationResult(INVALID, {self.errors!r})"


def _result(errors: List[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


# ========== Player Pool Validation ==========


def validate_player_pool(players: Sequence[Any]) -> ValidationResult:
    """Validate an eligible player list.

    Names must be non-blank strings and unique within the league.
    """
    errors: List[str] = []
    if not players:
        return _result(["No players available for team generation"])

    seen = set()
    for player in players:
        if not isinstance(player, str) or not player.strip():
            errors.append(f"Invalid player name: {player!r}")
            continue
        if player in seen:
            errors.append(f"Duplicate player: {player}")
        seen.add(player)
    return _result(errors)


def validate_player_pool_strict(players: Sequence[Any]) -> None:
    """Validate a player list and raise if invalid.

    Raises:
        PlayerPoolError: If the list is empty or has blank/duplicate names
    """
    result = validate_player_pool(players)
    if not result:
        raise PlayerPoolError(result.error_message)


# ========== Team Configuration Validation ==========


def validate_team_config(
    team_count: Any, team_sizes: Any, player_count: int
) -> ValidationResult:
    """Check a team configuration against the number of eligible players."""
    if not isinstance(team_sizes, (list, tuple)):
        return _result(["Team sizes must be a list"])
    if not isinstance(team_count, int) or isinstance(team_count, bool):
        return _result(["Team count must be an integer"])

    errors: List[str] = []
    if len(team_sizes) != team_count:
        errors.append(
            f"Team count ({team_count}) does not match the number of team sizes "
            f"({len(team_sizes)})"
        )
    for index, size in enumerate(team_sizes):
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            errors.append(f"Team size #{index + 1} must be a positive integer: {size!r}")
    if not errors and sum(team_sizes) != player_count:
        errors.append(
            f"Team sizes add up to {sum(team_sizes)} but {player_count} players are eligible"
        )
    return _result(errors)


def validate_team_config_strict(team_count: Any, team_sizes: Any, player_count: int) -> None:
    """Validate a team configuration and raise if invalid.

    Raises:
        TeamConfigurationError: If sizes and count do not fit the player pool
    """
    result = validate_team_config(team_count, team_sizes, player_count)
    if not result:
        raise TeamConfigurationError(result.error_message)


# ========== Score Validation ==========


def is_score(value: Any) -> bool:
    """A recorded score is a non-negative integer (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_score(value: Any, label: str = "score") -> ValidationResult:
    """A score is either unset (None) or a non-negative integer."""
    if value is None or is_score(value):
        return _result([])
    return _result([f"Invalid {label}: {value!r} (must be a non-negative integer)"])


def validate_scorers(
    scorers: Optional[Mapping[str, Any]],
    score: Optional[int],
    own_goals: int = 0,
    team_players: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """Validate the scorer map and own-goal count of one side of a match.

    Args:
        scorers: Player name -> goals
        score: Recorded team score, or None if unplayed
        own_goals: Goals credited to this side from opponents' own goals
        team_players: Team roster; scorer names are checked against it when given

    Returns:
        ValidationResult with validation status
    """
    scorers = scorers or {}
    if not isinstance(scorers, Mapping):
        return _result(["Scorers must map player names to goal counts"])
    if not isinstance(own_goals, int) or isinstance(own_goals, bool) or own_goals < 0:
        return _result([f"Invalid own goal count: {own_goals!r}"])

    if score is None:
        if scorers or own_goals:
            return _result(["Cannot assign scorers when score is not set"])
        return _result([])

    errors: List[str] = []
    roster = set(team_players) if team_players is not None else None
    total = own_goals
    for player, goals in scorers.items():
        if not isinstance(goals, int) or isinstance(goals, bool) or goals <= 0:
            errors.append(f"Invalid goal count for {player}: must be a positive integer")
            continue
        if roster is not None and player not in roster:
            errors.append(f"{player} is not on this team")
        total += goals

    if own_goals > MAX_OWN_GOALS:
        errors.append(
            f"Own goal count seems unusually high ({own_goals}). "
            f"Maximum allowed: {MAX_OWN_GOALS}"
        )
    if total > score:
        errors.append(f"Total assigned goals ({total}) exceeds team score ({score})")
    return _result(errors)
