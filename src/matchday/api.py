"""Request adapter for the HTTP surface.

Each endpoint function takes the request body plus the documents the caller
has already loaded, runs one engine operation, and answers with an
:class:`ApiResponse`. Persisting the returned body is the caller's job.
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

import functools
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from matchday.config import EngineConfig
from matchday.constants import METHOD_RANDOM
from matchday.exceptions import BracketStateError, MatchdayError, ScheduleStateError
from matchday.models.knockout import KnockoutBracket
from matchday.models.ranking import RankingTable
from matchday.models.schedule import ScheduleState
from matchday.models.team import TeamConfig
from matchday.rankings.engine import RankingsEngine, golden_boot
from matchday.scheduling import round_robin
from matchday.teams.generator import TeamGenerationRequest, TeamGenerator
from matchday.teams.teammate_history import TeammateHistory
from matchday.tournament import knockout, standings
from matchday.utils import setup_logger

logger = setup_logger(__name__)

GENERIC_ERROR = "Internal server error"


@dataclass
class ApiResponse:
    """Status code and JSON body."""

    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def endpoint(func: Callable[..., Dict[str, Any]]) -> Callable[..., ApiResponse]:
    """Wrap an endpoint so engine errors map to their status and anything else to 500."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> ApiResponse:
        try:
            return ApiResponse(200, func(*args, **kwargs))
        except MatchdayError as e:
            if e.is_client_error:
                logger.info(f"{func.__name__} rejected: {e.message}")
            else:
                logger.error(f"{func.__name__} failed: {e.message}")
            return ApiResponse(e.status_code, {"error": e.message})
        except Exception:
            logger.exception(f"Unexpected failure in {func.__name__}")
            return ApiResponse(500, {"error": GENERIC_ERROR})

    return wrapper


@endpoint
def generate_teams(
    body: Mapping[str, Any],
    players: Sequence[str],
    rankings: Optional[RankingTable] = None,
    history: Optional[TeammateHistory] = None,
    date: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """``{method, teamConfig: {teams, teamSizes}}`` -> ``{teams, config, drawHistory?}``."""
    config = config or EngineConfig()
    request = TeamGenerationRequest(
        players=list(players),
        config=TeamConfig.from_dict(body.get("teamConfig")),
        method=body.get("method", METHOD_RANDOM),
        rankings=rankings,
        history=history,
        record_history=bool(body.get("recordHistory", False)),
        date=date,
    )
    result = TeamGenerator.from_config(config, rng).generate(request)
    return result.to_dict()


@endpoint
def team_configurations(player_count: int, config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    config = config or EngineConfig()
    options = TeamGenerator.from_config(config).calculate_configurations(player_count)
    return {"playerCount": player_count, "configurations": [c.to_dict() for c in options]}


@endpoint
def schedule(
    body: Mapping[str, Any],
    teams: Mapping[str, Sequence[str]],
    state: Optional[ScheduleState] = None,
) -> Dict[str, Any]:
    """Generate, extend, or patch scores of a league schedule.

    ``{operation: "generate" | "addMore", anchorIndex}`` or a bare
    ``{rounds, anchorIndex}`` score patch.
    """
    names = list(teams)
    operation = body.get("operation")
    if operation == "generate":
        result = round_robin.generate(names, body.get("anchorIndex") or 0)
    elif operation == "addMore":
        if state is None:
            raise ScheduleStateError("No schedule to extend; generate one first")
        if state.anchor_index is None and "anchorIndex" in body:
            state = ScheduleState(
                rounds=state.rounds,
                anchor_index=body["anchorIndex"],
                team_count=state.team_count,
                version=state.version,
            )
        result = round_robin.add_more(state, names)
    elif operation is None and "rounds" in body:
        if state is None:
            raise ScheduleStateError("No schedule to update")
        result = round_robin.apply_score_updates(state, body["rounds"], teams)
    else:
        raise ScheduleStateError(f"Unknown schedule operation: {operation!r}")
    return result.to_dict()


@endpoint
def knockout_games(
    body: Mapping[str, Any],
    seeded_teams: Sequence[str],
    existing: Optional[KnockoutBracket] = None,
) -> Dict[str, Any]:
    """``{operation: "generate" | "updateScores", bracket?, confirm?}`` -> ``{knockoutGames}``.

    Regenerating over a bracket that already has scores needs ``confirm: true``.
    """
    operation = body.get("operation")
    if operation == "generate":
        if existing is not None and existing.in_progress and body.get("confirm") is not True:
            raise BracketStateError(
                "A knockout bracket is already in progress; confirm to regenerate",
                status_code=409,
            )
        bracket = knockout.generate(seeded_teams)
    elif operation == "updateScores":
        if "bracket" not in body:
            raise BracketStateError("updateScores requires a bracket")
        teams = body.get("teams") or (existing.teams if existing else list(seeded_teams))
        bracket = knockout.update_scores({"teams": teams, "bracket": body["bracket"]})
    else:
        raise BracketStateError(f"Unknown knockout operation: {operation!r}")
    return {"knockoutGames": bracket.to_dict()}


@endpoint
def league_table(
    state: Optional[ScheduleState], date: Optional[str] = None, teams: Optional[Sequence[str]] = None
) -> Dict[str, Any]:
    """-> ``{standings, date, teamCount}``."""
    matches = list(state.matches()) if state is not None else []
    rows = standings.calculate(matches, teams)
    return {"standings": [row.to_dict() for row in rows], "date": date, "teamCount": len(rows)}


@endpoint
def rankings(
    sessions: Iterable[Any],
    season: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """-> ``{players, rankingMetadata, calculatedDates}``."""
    config = config or EngineConfig()
    table = RankingsEngine(config.ranking).calculate(sessions, season)
    document = table.to_dict()
    return {
        "players": document["players"],
        "rankingMetadata": document["rankingMetadata"],
        "calculatedDates": document["calculatedDates"],
    }


@endpoint
def top_scorers(sessions: Iterable[Any], season: Optional[str] = None) -> Dict[str, Any]:
    """-> ``{scorers}``."""
    return {"scorers": golden_boot(sessions, season)}
