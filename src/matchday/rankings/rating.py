"""ELO-style player rating.

Ratings are individual, but matches are played by teams: the expected score
comes from the two sides' mean ratings and the side's total change is split
evenly across its players, so the two sides of one match sum to zero.
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

from datetime import date, datetime
from typing import Dict, Iterable, Optional, Sequence, Union

from dateutil.parser import isoparse

from matchday.config import RatingConfig
from matchday.constants import DRAW_SCORE, LOSS_SCORE, PHASE_CUP, WIN_SCORE
from matchday.models.ranking import RankingRecord, Rating
from matchday.type_hints import Phase

DateLike = Union[str, date, datetime]


def to_date(value: DateLike) -> date:
    """Parse an ISO date string (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(value).date()


def expected_score(rating_a: float, rating_b: float, scale: float = 400.0) -> float:
    """Expected score of side A against side B."""
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / scale))


def actual_score(score_a: int, score_b: int) -> float:
    if score_a > score_b:
        return WIN_SCORE
    if score_a < score_b:
        return LOSS_SCORE
    return DRAW_SCORE


def apply_decay(rating: Rating, on: DateLike, config: Optional[RatingConfig] = None) -> float:
    """Pull ``rating`` toward the baseline for every whole week since the last decay.

    Returns the rating change; the decay date only advances by whole weeks.
    """
    config = config or RatingConfig()
    today = to_date(on)
    if rating.last_decay_at is None:
        rating.last_decay_at = today.isoformat()
        return 0.0

    weeks = (today - to_date(rating.last_decay_at)).days // 7
    if weeks <= 0:
        return 0.0
    before = rating.value
    factor = (1.0 - config.decay_rate) ** weeks
    rating.value = config.baseline + (rating.value - config.baseline) * factor
    rating.last_decay_at = today.isoformat()
    return rating.value - before


def rate_match(
    home: Sequence[Rating],
    away: Sequence[Rating],
    home_score: int,
    away_score: int,
    on: str,
    phase: Phase,
    config: Optional[RatingConfig] = None,
) -> Dict[str, float]:
    """Update the ratings of both sides of one completed match.

    Parameters
    ----------
    home, away : sequence of Rating
        Ratings of each side's players; updated in place.
    home_score, away_score : int
        Final score.
    on : str
        Match date recorded on each delta.
    phase : str
        ``league`` or ``cup``; selects the K factor.

    Returns
    -------
    dict
        Per-player change for each side: ``{"home": d, "away": d}``.
    """
    config = config or RatingConfig()
    if not home or not away:
        return {"home": 0.0, "away": 0.0}

    k = config.k_cup if phase == PHASE_CUP else config.k_league
    mean_home = sum(r.value for r in home) / len(home)
    mean_away = sum(r.value for r in away) / len(away)
    surprise = actual_score(home_score, away_score) - expected_score(
        mean_home, mean_away, config.scale
    )
    side_total = k * surprise * (len(home) + len(away)) / 2.0
    changes = {"home": side_total / len(home), "away": -side_total / len(away)}

    for side, ratings in (("home", home), ("away", away)):
        for rating in ratings:
            rating.value += changes[side]
            rating.games_played += 1
            rating.deltas.append(
                {"date": on, "phase": phase, "delta": round(changes[side], 2)}
            )
    return changes


def provisional_anchor(
    records: Iterable[RankingRecord], config: Optional[RatingConfig] = None
) -> float:
    """Rating newcomers are pulled toward: just below the weakest established player."""
    config = config or RatingConfig()
    established = [
        r.rating.value for r in records if r.appearances >= config.provisional_threshold
    ]
    if not established:
        return config.baseline
    return min(established) * config.provisional_anchor_factor


def provisional_rating(
    record: RankingRecord, anchor: float, config: Optional[RatingConfig] = None
) -> float:
    """Seeding rating, blended from ``anchor`` until the threshold is reached."""
    config = config or RatingConfig()
    if record.appearances >= config.provisional_threshold:
        return record.rating.value
    weight = record.appearances / config.provisional_threshold
    return anchor + (record.rating.value - anchor) * weight
