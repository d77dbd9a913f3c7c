"""Team generation: random split and ranking-seeded snake draft.

The seeded method orders players by ranking composite, then rating, then name,
and deals them out snake-fashion so uneven team sizes still balance. When a
teammate history is supplied, a bounded local search swaps same-tier players
between teams to reduce repeated recent pairings.
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

import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from matchday.config import (
    EngineConfig,
    RatingConfig,
    SwapSearchConfig,
    TeamGenerationSettings,
)
from matchday.constants import (
    GENERATION_METHODS,
    METHOD_RANDOM,
    METHOD_SEEDED,
    TEAM_COLOURS,
    TEAM_NOUNS,
)
from matchday.exceptions import TeamConfigurationError
from matchday.interfaces import AVAILABLE, PlayerPool
from matchday.models.ranking import RankingTable
from matchday.models.team import DrawRecord, DrawStep, TeamConfig, TeamGenerationResult
from matchday.rankings.rating import provisional_anchor, provisional_rating
from matchday.teams.teammate_history import TeammateHistory
from matchday.type_hints import Method, TeamSizes, Teams
from matchday.utils import setup_logger
from matchday.utils.validation import (
    validate_player_pool_strict,
    validate_team_config_strict,
)

logger = setup_logger(__name__)

# (player, team index, pot number, players left in pot)
_Pick = Tuple[str, int, Optional[int], Optional[int]]


@dataclass(frozen=True)
class TeamGenerationRequest:
    """Everything one team generation needs, passed in a single value.

    Attributes:
        players: Eligible players, already capped by the player limit
        config: Requested team count and sizes
        method: ``random`` or ``seeded``
        rankings: Ranking snapshot used by the seeded method
        history: Teammate history used by the seeded method
        record_history: Whether to return a draw record
        date: Session date stored on the draw record
        team_names: Explicit team names instead of generated ones
    """

    players: Sequence[str]
    config: TeamConfig
    method: Method = METHOD_RANDOM
    rankings: Optional[RankingTable] = None
    history: Optional[TeammateHistory] = None
    record_history: bool = False
    date: Optional[str] = None
    team_names: Optional[Sequence[str]] = None


def calculate_configurations(
    player_count: int, settings: Optional[TeamGenerationSettings] = None
) -> List[TeamConfig]:
    """List the team layouts the league limits allow for ``player_count`` players.

    Sizes are as even as possible, larger teams first.
    """
    settings = settings or TeamGenerationSettings()
    configurations = []
    team_count = settings.min_teams
    while (
        team_count <= settings.max_teams
        and team_count * settings.min_players_per_team <= player_count
    ):
        base, extra = divmod(player_count, team_count)
        sizes = [base + 1 if i < extra else base for i in range(team_count)]
        if all(
            settings.min_players_per_team <= size <= settings.max_players_per_team
            for size in sizes
        ):
            configurations.append(TeamConfig(teams=team_count, team_sizes=sizes))
        team_count += 1
    return configurations


def eligible_players(
    pool: PlayerPool,
    date: str,
    league: str,
    settings: Optional[TeamGenerationSettings] = None,
) -> List[str]:
    """Players from ``pool`` taking part on ``date``.

    Waiting-list players are dropped and the rest capped at the league's
    player limit, in the order the pool returns them.
    """
    settings = settings or TeamGenerationSettings()
    membership = pool.membership(date, league)
    players = [
        name
        for name in pool.eligible_players(date, league)
        if membership.get(name, AVAILABLE) == AVAILABLE
    ]
    if len(players) > settings.player_limit:
        logger.debug(f"Capping {len(players)} players at {settings.player_limit}")
        players = players[: settings.player_limit]
    validate_player_pool_strict(players)
    return players


def generate_team_names(count: int, rng: random.Random) -> List[str]:
    """Unique ``"<Colour> <Noun>"`` names."""
    if count > len(TEAM_NOUNS):
        return [f"Team {i + 1}" for i in range(count)]
    colours = list(TEAM_COLOURS[:count])
    rng.shuffle(colours)
    nouns = rng.sample(TEAM_NOUNS, count)
    return [f"{colours[i % len(colours)]} {nouns[i]}" for i in range(count)]


def team_balance(
    teams: Teams,
    rankings: Optional[RankingTable],
    rating_config: Optional[RatingConfig] = None,
) -> Dict[str, object]:
    """Mean rating per team and the gap between the strongest and weakest."""
    rating_config = rating_config or RatingConfig()
    records = rankings.players if rankings else {}
    means = {}
    for name, players in teams.items():
        values = [
            records[p].rating.value if p in records else rating_config.baseline
            for p in players
        ]
        means[name] = round(sum(values) / len(values), 1) if values else 0.0
    delta = max(means.values()) - min(means.values()) if means else 0.0
    return {"teamRatings": means, "ratingDelta": round(delta, 1)}


def _spread(assignment: List[List[str]], strength: Dict[str, float]) -> float:
    means = [sum(strength[p] for p in team) / len(team) for team in assignment if team]
    return max(means) - min(means) if means else 0.0


def _swap_candidates(
    assignment: List[List[str]], tiers: Dict[str, int]
) -> Iterator[Tuple[int, int, int, int]]:
    for t1 in range(len(assignment)):
        for t2 in range(t1 + 1, len(assignment)):
            for i, p in enumerate(assignment[t1]):
                for j, q in enumerate(assignment[t2]):
                    if tiers[p] == tiers[q]:
                        yield t1, i, t2, j


class TeamGenerator:
    """Partition an eligible player pool into teams.

    The only instance state is configuration and the random source; every
    call to :meth:`generate` takes its full input explicitly.
    """

    def __init__(
        self,
        settings: Optional[TeamGenerationSettings] = None,
        rng: Optional[random.Random] = None,
        swap_search: Optional[SwapSearchConfig] = None,
        rating_config: Optional[RatingConfig] = None,
    ):
        self.settings = settings or TeamGenerationSettings()
        self.rng = rng or random.Random()
        self.swap_search = swap_search or SwapSearchConfig()
        self.rating_config = rating_config or RatingConfig()

    @classmethod
    def from_config(
        cls, config: EngineConfig, rng: Optional[random.Random] = None
    ) -> "TeamGenerator":
        return cls(
            settings=config.team_generation,
            rng=rng,
            swap_search=config.swap_search,
            rating_config=config.ranking.rating,
        )

    def calculate_configurations(self, player_count: int) -> List[TeamConfig]:
        return calculate_configurations(player_count, self.settings)

    def generate(self, request: TeamGenerationRequest) -> TeamGenerationResult:
        """Generate teams for ``request``.

        Raises
        ------
        TeamConfigurationError
            If the method is unknown or the sizes do not fit the pool.
        PlayerPoolError
            If the pool is empty or has blank or duplicate names.
        """
        if request.method not in GENERATION_METHODS:
            raise TeamConfigurationError(
                f"Unknown generation method: {request.method!r}. "
                f"Expected one of {', '.join(GENERATION_METHODS)}"
            )
        players = list(request.players)
        validate_player_pool_strict(players)
        config = request.config
        validate_team_config_strict(config.teams, config.team_sizes, len(players))
        names = self._team_names(config.teams, request.team_names)

        if request.method == METHOD_SEEDED:
            assignment, picks = self._seeded(
                players, config.team_sizes, request.rankings, request.history
            )
        else:
            assignment, picks = self._random(players, config.team_sizes)

        teams = {names[i]: assignment[i] for i in range(config.teams)}
        draw = None
        if request.record_history:
            steps = [
                DrawStep(
                    step=n + 1,
                    player=player,
                    to_team=names[team_index],
                    from_pot=pot,
                    pot_players_remaining=remaining,
                )
                for n, (player, team_index, pot, remaining) in enumerate(picks)
            ]
            draw = DrawRecord(date=request.date, method=request.method, teams=teams, steps=steps)

        logger.info(
            f"Generated {config.teams} teams ({request.method}) from {len(players)} players"
        )
        return TeamGenerationResult(
            teams=teams,
            method=request.method,
            total_players=len(players),
            draw_history=draw,
        )

    def player_strengths(
        self, players: Sequence[str], rankings: Optional[RankingTable]
    ) -> Dict[str, Tuple[float, float]]:
        """Player -> (ranking composite, seeding rating).

        Unranked players get composite 0 and the provisional anchor rating.
        """
        records = rankings.players if rankings else {}
        anchor = provisional_anchor(records.values(), self.rating_config)
        strengths = {}
        for player in players:
            record = records.get(player)
            if record is None:
                strengths[player] = (0.0, anchor)
            else:
                strengths[player] = (
                    record.ranking_points,
                    provisional_rating(record, anchor, self.rating_config),
                )
        return strengths

    def _team_names(self, count: int, requested: Optional[Sequence[str]]) -> List[str]:
        if requested is None:
            return generate_team_names(count, self.rng)
        names = list(requested)
        if len(names) != count or len(set(names)) != count:
            raise TeamConfigurationError(
                f"Expected {count} unique team names, got {len(names)}"
            )
        return names

    def _random(
        self, players: List[str], sizes: TeamSizes
    ) -> Tuple[List[List[str]], List[_Pick]]:
        shuffled = list(players)
        self.rng.shuffle(shuffled)
        assignment = []
        picks: List[_Pick] = []
        start = 0
        for index, size in enumerate(sizes):
            team = shuffled[start : start + size]
            assignment.append(team)
            picks.extend((player, index, None, None) for player in team)
            start += size
        return assignment, picks

    def _seeded(
        self,
        players: List[str],
        sizes: TeamSizes,
        rankings: Optional[RankingTable],
        history: Optional[TeammateHistory],
    ) -> Tuple[List[List[str]], List[_Pick]]:
        strengths = self.player_strengths(players, rankings)
        ordered = sorted(players, key=lambda p: (-strengths[p][0], -strengths[p][1], p))

        assignment: List[List[str]] = [[] for _ in sizes]
        tiers: Dict[str, int] = {}
        pots: List[List[Tuple[str, int]]] = []
        position = 0
        forward = True
        while position < len(ordered):
            order = range(len(sizes)) if forward else reversed(range(len(sizes)))
            pot = []
            for team_index in order:
                if position >= len(ordered):
                    break
                if len(assignment[team_index]) >= sizes[team_index]:
                    continue
                player = ordered[position]
                assignment[team_index].append(player)
                tiers[player] = len(pots)
                pot.append((player, team_index))
                position += 1
            pots.append(pot)
            forward = not forward

        if history is not None and history.pairs:
            rating = {p: strengths[p][1] for p in players}
            self._reduce_repeats(assignment, tiers, rating, history)
        else:
            logger.debug("No teammate history; keeping snake draft as drawn")

        final_team = {p: t for t, team in enumerate(assignment) for p in team}
        picks: List[_Pick] = []
        for pot_index, pot in enumerate(pots):
            for n, (player, _) in enumerate(pot):
                picks.append((player, final_team[player], pot_index + 1, len(pot) - n - 1))
        return assignment, picks

    def _reduce_repeats(
        self,
        assignment: List[List[str]],
        tiers: Dict[str, int],
        strength: Dict[str, float],
        history: TeammateHistory,
    ) -> int:
        """Swap same-tier players between teams to lower repeated pairings.

        Takes the best improving swap per pass. A swap is only accepted when
        the spread of team mean strength stays within the draft's spread plus
        the configured tolerance of the pool's strength range. Modifies
        ``assignment`` in place and returns the number of swaps made.
        """
        search = self.swap_search
        values = list(strength.values())
        pool_range = max(values) - min(values) if values else 0.0
        limit = _spread(assignment, strength) + search.balance_tolerance * pool_range
        weights = [history.pair_weight(team) for team in assignment]
        initial_weight = sum(weights)

        swaps = 0
        evaluations = 0
        while swaps < search.max_improving_swaps and evaluations < search.max_evaluations:
            best = None
            for t1, i, t2, j in _swap_candidates(assignment, tiers):
                if evaluations >= search.max_evaluations:
                    break
                evaluations += 1
                team1 = list(assignment[t1])
                team2 = list(assignment[t2])
                team1[i], team2[j] = assignment[t2][j], assignment[t1][i]
                w1 = history.pair_weight(team1)
                w2 = history.pair_weight(team2)
                gain = weights[t1] + weights[t2] - w1 - w2
                if gain <= 0 or (best is not None and gain <= best[0]):
                    continue
                trial = list(assignment)
                trial[t1], trial[t2] = team1, team2
                if _spread(trial, strength) > limit + 1e-9:
                    continue
                best = (gain, t1, t2, team1, team2, w1, w2)

            if best is None:
                break
            gain, t1, t2, team1, team2, w1, w2 = best
            assignment[t1], assignment[t2] = team1, team2
            weights[t1], weights[t2] = w1, w2
            swaps += 1
            logger.debug(f"Swap {swaps} between teams {t1 + 1} and {t2 + 1} removed {gain} repeats")

        logger.info(
            f"Teammate swap search: {swaps} swaps, {evaluations} evaluations, "
            f"repeat weight {initial_weight} -> {sum(weights)}"
        )
        return swaps
