"""Record schemas shared by the Matchday engines."""

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

from matchday.models.knockout import KnockoutBracket, KnockoutMatch
from matchday.models.ranking import Rating, RankingRecord, RankingTable, SessionDetail
from matchday.models.schedule import Match, ScheduleState, decode_rounds
from matchday.models.session import SessionRecord
from matchday.models.standing import Standing
from matchday.models.team import DrawRecord, DrawStep, TeamConfig, TeamGenerationResult

__all__ = [
    "DrawRecord",
    "DrawStep",
    "KnockoutBracket",
    "KnockoutMatch",
    "Match",
    "RankingRecord",
    "RankingTable",
    "Rating",
    "ScheduleState",
    "SessionDetail",
    "SessionRecord",
    "Standing",
    "TeamConfig",
    "TeamGenerationResult",
    "decode_rounds",
]
