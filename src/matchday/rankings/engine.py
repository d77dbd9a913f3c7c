"""Cross-session rankings.

Sessions are replayed in date order from scratch. Every appearance earns
points (appearance, league points of the team, a table-position bonus and
knockout wins), every completed match moves ratings, and after each date a
rank snapshot of every tracked player is stored so movement can be shown.

The composite ("ranking points") pulls the per-appearance average of players
below a confidence threshold toward the lowest average, then scales it by
the most appearances anyone has made. Players are ordered by the composite,
then cumulative points, then rating.
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

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from dateutil.relativedelta import relativedelta

from matchday.config import RankingConfig
from matchday.constants import PHASE_CUP, PHASE_LEAGUE
from matchday.models.ranking import RankingRecord, RankingTable, SessionDetail
from matchday.models.session import SessionRecord
from matchday.rankings.rating import DateLike, apply_decay, rate_match, to_date
from matchday.tournament import knockout, standings
from matchday.utils import setup_logger

logger = setup_logger(__name__)


class RankingsEngine:
    """Compute ranking tables from completed sessions.

    Parameters
    ----------
    config : RankingConfig, optional
        Points, composite and rating parameters.
    """

    def __init__(self, config: Optional[RankingConfig] = None):
        self.config = config or RankingConfig()

    def calculate(
        self,
        sessions: Iterable[Union[SessionRecord, Dict[str, Any]]],
        season: Optional[Union[int, str]] = None,
    ) -> RankingTable:
        """Replay ``sessions`` chronologically into a ranking table.

        With ``season`` given, only dates in that year are used. Sessions
        without teams, rounds or any completed league match are skipped.
        """
        decoded = [s if isinstance(s, SessionRecord) else SessionRecord.from_dict(s) for s in sessions]
        if season is not None:
            decoded = [s for s in decoded if s.date.startswith(str(season))]

        players: Dict[str, RankingRecord] = {}
        calculated: List[str] = []
        for session in sorted(decoded, key=lambda s: s.date):
            if not session.teams or not session.rounds or not session.has_results:
                logger.debug(f"Skipping {session.date}: no completed games")
                continue
            self._ingest(players, session)
            calculated.append(session.date)

        metadata = self._rank(players)
        _movement(players)
        logger.info(f"Rankings calculated for {len(players)} players over {len(calculated)} dates")
        return RankingTable(
            season=str(season) if season is not None else None,
            players=players,
            calculated_dates=calculated,
            ranking_metadata=metadata,
            last_updated=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

    def _ingest(self, players: Dict[str, RankingRecord], session: SessionRecord) -> None:
        date = session.date
        rating_config = self.config.rating
        for record in players.values():
            apply_decay(record.rating, date, rating_config)

        matches = session.league_matches()
        table = standings.calculate(matches, list(session.teams))
        position = {row.team: i for i, row in enumerate(table)}
        points = {row.team: row.points for row in table}
        league_winner = table[0].team if table else None

        knockout_wins: Dict[str, int] = {}
        cup_winner = None
        if session.knockout is not None:
            for m in session.knockout.bracket:
                winner = m.winner()
                if winner is not None and not m.bye:
                    knockout_wins[winner] = knockout_wins.get(winner, 0) + 1
            cup_winner = knockout.champion(session.knockout)

        team_count = len(session.teams)
        for team, members in session.teams.items():
            for name in members:
                record = players.get(name)
                if record is None:
                    record = players[name] = RankingRecord()
                    apply_decay(record.rating, date, rating_config)
                detail = SessionDetail(
                    team=team,
                    appearance_points=self.config.appearance_points,
                    match_points=points.get(team, 0),
                    bonus_points=(team_count - 1 - position[team]) * self.config.bonus_multiplier,
                    knockout_points=knockout_wins.get(team, 0) * self.config.knockout_multiplier,
                    league_winner=team == league_winner,
                    cup_winner=cup_winner is not None and team == cup_winner,
                )
                detail.total_points = (
                    detail.appearance_points
                    + detail.match_points
                    + detail.bonus_points
                    + detail.knockout_points
                )
                record.points += detail.total_points
                record.appearances += 1
                record.last_appearance = date
                record.league_wins += int(detail.league_winner)
                record.cup_wins += int(detail.cup_winner)
                record.ranking_detail[date] = detail

        self._rate(players, session, matches)
        for team, members in session.teams.items():
            for name in members:
                players[name].ranking_detail[date].rating = round(players[name].rating.value)

        self._rank(players)
        self._snapshot(players, date)

    def _rate(self, players, session: SessionRecord, matches) -> None:
        rated = [(m, PHASE_LEAGUE) for m in matches if m.is_complete]
        if session.knockout is not None:
            rated.extend(
                (m, PHASE_CUP)
                for m in session.knockout.bracket
                if m.is_played and m.home in session.teams and m.away in session.teams
            )
        for match, phase in rated:
            home = [players[p].rating for p in session.teams.get(match.home, []) if p in players]
            away = [players[p].rating for p in session.teams.get(match.away, []) if p in players]
            rate_match(
                home, away, match.home_score, match.away_score, session.date, phase,
                self.config.rating,
            )

    def _rank(self, players: Dict[str, RankingRecord]) -> Dict[str, Any]:
        """Compute the composite for every player and assign ranks."""
        active = {name: r for name, r in players.items() if r.appearances > 0}
        if not active:
            return {
                "globalAverage": 0,
                "minAverage": 0,
                "maxAppearances": 0,
                "confidenceThreshold": 0,
                "totalPlayers": 0,
            }

        max_appearances = max(r.appearances for r in active.values())
        threshold = max(1, int(self.config.confidence_fraction * max_appearances + 0.5))
        total_points = sum(r.points for r in active.values())
        total_appearances = sum(r.appearances for r in active.values())
        min_average = min(r.points / r.appearances for r in active.values())

        for record in active.values():
            record.raw_average = record.points / record.appearances
            if record.appearances >= threshold:
                record.pull_factor = 0.0
            else:
                record.pull_factor = self.config.pull_strength * (
                    (threshold - record.appearances) / threshold
                )
            record.weighted_average = (
                record.raw_average * (1.0 - record.pull_factor) + min_average * record.pull_factor
            )
            record.ranking_points = record.weighted_average * max_appearances
            record.has_full_confidence = record.appearances >= threshold
            record.games_until_full_confidence = max(0, threshold - record.appearances)

        ordered = sorted(
            active.items(),
            key=lambda item: (
                -item[1].ranking_points,
                -item[1].points,
                -item[1].rating.value,
                item[0],
            ),
        )
        for rank, (_, record) in enumerate(ordered, start=1):
            record.rank = rank

        return {
            "globalAverage": round(total_points / total_appearances, 2),
            "minAverage": round(min_average, 2),
            "maxAppearances": max_appearances,
            "confidenceThreshold": threshold,
            "confidenceFraction": self.config.confidence_fraction,
            "pullStrength": self.config.pull_strength,
            "totalPlayers": len(active),
        }

    def _snapshot(self, players: Dict[str, RankingRecord], date: str) -> None:
        total = sum(1 for r in players.values() if r.rank is not None)
        for record in players.values():
            detail = record.ranking_detail.get(date)
            if detail is None:
                detail = record.ranking_detail[date] = SessionDetail(
                    rating=round(record.rating.value)
                )
            detail.rank = record.rank
            detail.total_players = total
            detail.ranking_points = round(record.ranking_points, 2)

    def is_active(self, record: RankingRecord, as_of: DateLike) -> bool:
        """Played at least twice, most recently within the activity window."""
        if record.appearances < self.config.active_min_appearances:
            return False
        if record.last_appearance is None:
            return False
        cutoff = to_date(as_of) - relativedelta(months=self.config.active_window_months)
        return to_date(record.last_appearance) >= cutoff

    def aggregate_seasons(self, tables: Iterable[Optional[RankingTable]]) -> RankingTable:
        """Combine season tables into one all-time table.

        Counters are summed and per-date details unioned; each player keeps
        the rating from their most recent appearance. Missing seasons
        (``None``) are skipped.
        """
        players: Dict[str, RankingRecord] = {}
        dates = set()
        seasons = []
        for table in tables:
            if table is None:
                logger.info("Skipping missing season in aggregation")
                continue
            seasons.append(table.season)
            dates.update(table.calculated_dates)
            for name, record in table.players.items():
                merged = players.get(name)
                if merged is None:
                    merged = players[name] = RankingRecord()
                merged.appearances += record.appearances
                merged.points += record.points
                merged.league_wins += record.league_wins
                merged.cup_wins += record.cup_wins
                merged.ranking_detail.update(record.ranking_detail)
                if merged.last_appearance is None or (
                    record.last_appearance is not None
                    and record.last_appearance > merged.last_appearance
                ):
                    merged.last_appearance = record.last_appearance
                    merged.rating = record.rating.copy()

        metadata = self._rank(players)
        _movement(players)
        return RankingTable(
            season="+".join(str(s) for s in seasons if s is not None) or None,
            players=players,
            calculated_dates=sorted(dates),
            ranking_metadata=metadata,
            last_updated=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )


def _movement(players: Dict[str, RankingRecord]) -> None:
    """Rank change between the two latest snapshots; positive means moved up."""
    for record in players.values():
        ranked_dates = sorted(d for d, detail in record.ranking_detail.items() if detail.rank)
        if len(ranked_dates) < 2:
            record.previous_rank = None
            record.rank_movement = 0
            record.is_new = True
            continue
        current = record.ranking_detail[ranked_dates[-1]].rank
        previous = record.ranking_detail[ranked_dates[-2]].rank
        record.previous_rank = previous
        record.rank_movement = previous - current
        record.is_new = False


def champions(table: RankingTable) -> List[Dict[str, Any]]:
    """Hall of fame: every player with a title, most titles first."""
    result = []
    for name, record in table.players.items():
        league_dates = sorted(d for d, s in record.ranking_detail.items() if s.league_winner)
        cup_dates = sorted(d for d, s in record.ranking_detail.items() if s.cup_winner)
        league = max(record.league_wins, len(league_dates))
        cup = max(record.cup_wins, len(cup_dates))
        if league + cup == 0:
            continue
        result.append(
            {
                "player": name,
                "leagueWins": league,
                "cupWins": cup,
                "total": league + cup,
                "leagueDates": league_dates,
                "cupDates": cup_dates,
            }
        )
    result.sort(key=lambda c: (-c["total"], -c["leagueWins"], -c["cupWins"], c["player"]))
    return result


def _add_goals(totals: Dict[str, Dict[str, int]], scorers: Dict[str, Any], kind: str) -> None:
    for player, goals in scorers.items():
        # __ownGoal__ and __unassigned__ are bookkeeping entries, not players
        if player.startswith("__") and player.endswith("__"):
            continue
        if not isinstance(goals, int) or isinstance(goals, bool) or goals <= 0:
            continue
        entry = totals.setdefault(player, {"leagueGoals": 0, "cupGoals": 0})
        entry[kind] += goals


def golden_boot(
    sessions: Iterable[Union[SessionRecord, Dict[str, Any]]],
    season: Optional[Union[int, str]] = None,
) -> List[Dict[str, Any]]:
    """Top scorers over ``sessions``, league and cup goals counted apart.

    Bye matches are ignored. Sorted by total, then league goals, then cup
    goals, then name.
    """
    decoded = [s if isinstance(s, SessionRecord) else SessionRecord.from_dict(s) for s in sessions]
    if season is not None:
        decoded = [s for s in decoded if s.date.startswith(str(season))]

    totals: Dict[str, Dict[str, int]] = {}
    for session in decoded:
        for match in session.league_matches():
            if match.bye:
                continue
            _add_goals(totals, match.home_scorers, "leagueGoals")
            _add_goals(totals, match.away_scorers, "leagueGoals")
        if session.knockout is not None:
            for cup_match in session.knockout.bracket:
                if cup_match.bye:
                    continue
                _add_goals(totals, cup_match.home_scorers, "cupGoals")
                _add_goals(totals, cup_match.away_scorers, "cupGoals")

    result = [
        {
            "player": player,
            "leagueGoals": goals["leagueGoals"],
            "cupGoals": goals["cupGoals"],
            "total": goals["leagueGoals"] + goals["cupGoals"],
        }
        for player, goals in totals.items()
    ]
    result.sort(key=lambda s: (-s["total"], -s["leagueGoals"], -s["cupGoals"], s["player"]))
    logger.debug(f"Golden boot over {len(decoded)} sessions: {len(result)} scorers")
    return result
