"""Exceptions for use in Matchday.

Every error raised by the engine belongs to the closed set below. Each class
carries an explicit classification so the request boundary can pick a status
without looking at the message text.
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

from enum import Enum
from typing import Optional


class ErrorClass(Enum):
    """Who caused a failure."""

    CLIENT = "client"
    SERVER = "server"


# ========== Base Application Exception ==========


class MatchdayError(Exception):
    """Base exception for all Matchday errors.

    Attributes
    ----------
    error_class : ErrorClass
        Client-caused or server-caused.
    status_code : int
        Status the request boundary should answer with.
    """

    error_class: ErrorClass = ErrorClass.SERVER
    default_status: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status

    @property
    def is_client_error(self) -> bool:
        return self.error_class is ErrorClass.CLIENT


# ========== Team Exceptions ==========


class TeamConfigurationError(MatchdayError):
    """Raised when team count and team sizes do not fit the player pool."""

    error_class = ErrorClass.CLIENT
    default_status = 400


class PlayerPoolError(MatchdayError):
    """Raised when the eligible player list is empty or invalid."""

    error_class = ErrorClass.CLIENT
    default_status = 400


# ========== Schedule Exceptions ==========


class ScheduleStateError(MatchdayError):
    """Raised when a stored schedule is missing, corrupt, or edited inconsistently."""

    error_class = ErrorClass.CLIENT
    default_status = 400


# ========== Knockout Exceptions ==========


class BracketStateError(MatchdayError):
    """Raised for malformed brackets and unconfirmed regeneration."""

    error_class = ErrorClass.CLIENT
    default_status = 400


# ========== Ranking Exceptions ==========


class RankingDataError(MatchdayError):
    """Raised when stored season data cannot be decoded."""

    error_class = ErrorClass.SERVER
    default_status = 500

