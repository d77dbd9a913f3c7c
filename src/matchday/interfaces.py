"""Collaborator interfaces consumed by Matchday.

The engine never touches storage or the player lists itself; callers load
documents through these interfaces, pass them in, and persist the results.
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

from typing import Any, Dict, List, Optional, Protocol

AVAILABLE = "available"
WAITING = "waiting"


class Persistence(Protocol):
    """Generic (category, date, league) keyed document store.

    Writers of one (league, date) key must be serialised by the
    implementation (per-key lock or compare-and-swap).
    """

    def get(
        self,
        category: str,
        date: Optional[str],
        league: Optional[str] = None,
        default: Any = None,
    ) -> Any: ...

    def set(
        self,
        category: str,
        date: Optional[str],
        value: Any,
        default: Any = None,
        merge: bool = False,
        league: Optional[str] = None,
    ) -> bool: ...


class PlayerPool(Protocol):
    """Supplies the eligible, limit-capped player list for a date."""

    def eligible_players(self, date: str, league: str) -> List[str]: ...

    def membership(self, date: str, league: str) -> Dict[str, str]:
        """Player name -> ``available`` or ``waiting``."""
        ...
