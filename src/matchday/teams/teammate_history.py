"""Sliding-window teammate history.

The pair-frequency map is always rebuilt from the most recent draw records;
older drawings fall out of the window entirely.
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

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from matchday.constants import CATEGORY_DRAW_HISTORY, DEFAULT_HISTORY_WINDOW
from matchday.interfaces import Persistence
from matchday.models.team import DrawRecord
from matchday.type_hints import PlayerPair
from matchday.utils import pair_key, setup_logger, team_pairs

logger = setup_logger(__name__)


@dataclass
class TeammateHistory:
    """How often each pair of players shared a team in recent drawings."""

    pairs: Dict[PlayerPair, int] = field(default_factory=dict)
    session_count: int = 0
    window: int = DEFAULT_HISTORY_WINDOW
    dates: List[str] = field(default_factory=list)

    @property
    def players(self) -> List[str]:
        names = set()
        for pair in self.pairs:
            names.update(pair)
        return sorted(names)

    @property
    def total_pairs(self) -> int:
        return len(self.pairs)

    @property
    def max_count(self) -> int:
        return max(self.pairs.values(), default=0)

    def count(self, player1: str, player2: str) -> int:
        return self.pairs.get(pair_key(player1, player2), 0)

    def pair_weight(self, team: Iterable[str]) -> int:
        """Total number of past co-occurrences among the members of ``team``."""
        return sum(self.pairs.get(pair, 0) for pair in team_pairs(team))

    def to_dict(self) -> Dict[str, Any]:
        """Matrix form: player -> teammate -> count, both directions filled."""
        matrix: Dict[str, Dict[str, int]] = {}
        for pair, n in self.pairs.items():
            a, b = sorted(pair)
            matrix.setdefault(a, {})[b] = n
            matrix.setdefault(b, {})[a] = n
        return {
            "players": self.players,
            "matrix": {p: dict(sorted(matrix[p].items())) for p in sorted(matrix)},
            "sessionCount": self.session_count,
            "window": self.window,
            "dates": list(self.dates),
            "metadata": {
                "totalPairs": self.total_pairs,
                "maxPairingCount": self.max_count,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeammateHistory":
        pairs: Dict[PlayerPair, int] = {}
        for a, row in (data.get("matrix") or {}).items():
            for b, n in row.items():
                if a != b and n:
                    pairs[pair_key(a, b)] = int(n)
        return cls(
            pairs=pairs,
            session_count=data.get("sessionCount", 0),
            window=data.get("window", DEFAULT_HISTORY_WINDOW),
            dates=list(data.get("dates", [])),
        )


def build(
    records: Iterable[Union[DrawRecord, Dict[str, Any]]],
    window: int = DEFAULT_HISTORY_WINDOW,
) -> TeammateHistory:
    """Build the pair map from the ``window`` most recent draw records."""
    if window < 1:
        raise ValueError(f"History window must be positive, got {window}")

    decoded = [r if isinstance(r, DrawRecord) else DrawRecord.from_dict(r) for r in records]
    recent = sorted(decoded, key=lambda r: r.date or "", reverse=True)[:window]

    counts: Counter = Counter()
    for record in recent:
        for players in record.teams.values():
            counts.update(team_pairs(players))

    history = TeammateHistory(
        pairs=dict(counts),
        session_count=len(recent),
        window=window,
        dates=[r.date for r in recent],
    )
    logger.debug(
        f"Built teammate history from {history.session_count} drawings: "
        f"{history.total_pairs} pairs, max count {history.max_count}"
    )
    return history


def load(
    store: Persistence,
    league: Optional[str],
    dates: Sequence[str],
    window: int = DEFAULT_HISTORY_WINDOW,
) -> Optional[TeammateHistory]:
    """Read draw records through ``store`` and build the history.

    Returns None when the store fails, so callers can fall back to
    unweighted seeded generation.
    """
    records: List[DrawRecord] = []
    try:
        for date in sorted(dates, reverse=True):
            if len(records) >= window:
                break
            document = store.get(CATEGORY_DRAW_HISTORY, date, league, default=None)
            if document:
                records.append(DrawRecord.from_dict(document, date=date))
    except (OSError, LookupError, TypeError, ValueError) as exc:
        logger.warning(f"Teammate history unavailable for league {league!r}: {exc}")
        return None
    return build(records, window)
