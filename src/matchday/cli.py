"""Command-line interface for Matchday.

Every sub-command reads JSON documents from files and prints the result as
JSON, so sessions can be worked through without a server.
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

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, List, Optional

from matchday.config import EngineConfig
from matchday.constants import GENERATION_METHODS, METHOD_RANDOM
from matchday.exceptions import MatchdayError
from matchday.models.knockout import KnockoutBracket
from matchday.models.ranking import RankingTable
from matchday.models.schedule import ScheduleState
from matchday.models.session import SessionRecord
from matchday.models.team import TeamConfig
from matchday.rankings.engine import RankingsEngine, champions, golden_boot
from matchday.scheduling import round_robin
from matchday.teams import teammate_history
from matchday.teams.generator import TeamGenerationRequest, TeamGenerator, team_balance
from matchday.tournament import knockout, standings
from matchday.utils import configure_logging, setup_logger

logger = setup_logger(__name__)


def load_json(path: str) -> Any:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def load_configuration(config_file: Optional[str]) -> EngineConfig:
    """Load engine configuration from a JSON file, or use defaults."""
    if not config_file:
        return EngineConfig()
    config = EngineConfig.from_dict(load_json(config_file))
    logger.info(f"Loaded configuration from: {config_file}")
    return config


def _teams_document(data: Any) -> dict:
    """Accept a bare team mapping or a team generation result."""
    if isinstance(data, dict) and isinstance(data.get("teams"), dict):
        return data["teams"]
    return data


def _print(document: Any) -> None:
    print(json.dumps(document, indent=2))


def run_teams(args: argparse.Namespace, config: EngineConfig, rng: random.Random) -> int:
    players = load_json(args.players)
    generator = TeamGenerator.from_config(config, rng)
    if not args.sizes:
        _print([c.to_dict() for c in generator.calculate_configurations(len(players))])
        return 0

    rankings = RankingTable.from_dict(load_json(args.rankings)) if args.rankings else None
    history = None
    if args.history:
        history = teammate_history.build(
            [load_json(path) for path in args.history], config.history.window
        )
    request = TeamGenerationRequest(
        players=players,
        config=TeamConfig(teams=len(args.sizes), team_sizes=args.sizes),
        method=args.method,
        rankings=rankings,
        history=history,
        record_history=args.record_history,
        date=args.date,
    )
    result = generator.generate(request)
    document = result.to_dict()
    document["balance"] = team_balance(result.teams, rankings, config.ranking.rating)
    _print(document)
    return 0


def run_schedule(args: argparse.Namespace, config: EngineConfig, rng: random.Random) -> int:
    teams = list(_teams_document(load_json(args.teams)))
    if args.add_more:
        if not args.state:
            logger.error("--add-more needs --state")
            return 1
        state = ScheduleState.from_dict(load_json(args.state))
        result = round_robin.add_more(state, teams, args.rounds)
    else:
        result = round_robin.generate(teams, args.anchor, args.rounds)
    _print(result.to_dict())
    return 0


def run_standings(args: argparse.Namespace, config: EngineConfig, rng: random.Random) -> int:
    state = ScheduleState.from_dict(load_json(args.schedule))
    rows = standings.calculate(state.matches())
    _print({"standings": [row.to_dict() for row in rows], "status": round_robin.schedule_status(state)})
    return 0


def run_knockout(args: argparse.Namespace, config: EngineConfig, rng: random.Random) -> int:
    if args.update:
        bracket = knockout.update_scores(KnockoutBracket.from_dict(load_json(args.update)))
    else:
        data = load_json(args.seeds)
        if isinstance(data, dict):
            seeds = standings.seeding(ScheduleState.from_dict(data).matches())
        else:
            seeds = list(data)
        bracket = knockout.generate(seeds)
    document = {"knockoutGames": bracket.to_dict(), "champion": knockout.champion(bracket)}
    _print(document)
    return 0


def run_rankings(args: argparse.Namespace, config: EngineConfig, rng: random.Random) -> int:
    data = load_json(args.sessions)
    if isinstance(data, dict):
        sessions = [SessionRecord.from_dict(s, date=d) for d, s in data.items()]
    else:
        sessions = [SessionRecord.from_dict(s) for s in data]
    if args.golden_boot:
        _print(golden_boot(sessions, args.season))
        return 0
    table = RankingsEngine(config.ranking).calculate(sessions, args.season)
    if args.champions:
        _print(champions(table))
    else:
        _print(table.to_dict())
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="matchday",
        description="Teams, fixtures, knockouts and rankings for recurring sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Valid team layouts for a player list
  matchday teams players.json

  # Seeded teams of 6, 6 and 5
  matchday teams players.json --sizes 6 6 5 --method seeded --rankings rankings.json

  # Full round robin, then one more cycle
  matchday schedule teams.json > schedule.json
  matchday schedule teams.json --state schedule.json --add-more
        """,
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--config", help="Load configuration from JSON file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    teams = sub.add_parser("teams", help="Generate teams from a JSON list of players")
    teams.add_argument("players")
    teams.add_argument("--sizes", type=int, nargs="+", help="Team sizes, one per team")
    teams.add_argument("--method", choices=GENERATION_METHODS, default=METHOD_RANDOM)
    teams.add_argument("--rankings", help="Ranking table JSON for seeded generation")
    teams.add_argument("--history", nargs="*", default=[], help="Draw record JSON files")
    teams.add_argument("--record-history", action="store_true")
    teams.add_argument("--date")
    teams.set_defaults(func=run_teams)

    schedule = sub.add_parser("schedule", help="Generate or extend a round robin")
    schedule.add_argument("teams", help="Team mapping or team generation result JSON")
    schedule.add_argument("--state", help="Existing schedule JSON")
    schedule.add_argument("--add-more", action="store_true")
    schedule.add_argument("--rounds", type=int)
    schedule.add_argument("--anchor", type=int, default=0)
    schedule.set_defaults(func=run_schedule)

    table = sub.add_parser("standings", help="League table of a schedule")
    table.add_argument("schedule")
    table.set_defaults(func=run_standings)

    cup = sub.add_parser("knockout", help="Generate or advance a knockout bracket")
    group = cup.add_mutually_exclusive_group(required=True)
    group.add_argument("--seeds", help="Seeded team list, or a schedule to seed from")
    group.add_argument("--update", help="Bracket JSON with edited scores")
    cup.set_defaults(func=run_knockout)

    ranking = sub.add_parser("rankings", help="Rankings from session JSON")
    ranking.add_argument("sessions", help="List of sessions, or a date -> session mapping")
    ranking.add_argument("--season")
    board = ranking.add_mutually_exclusive_group()
    board.add_argument("--champions", action="store_true", help="Print the hall of fame")
    board.add_argument("--golden-boot", action="store_true", help="Print the top scorers")
    ranking.set_defaults(func=run_rankings)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_configuration(args.config)
        return args.func(args, config, random.Random(args.seed))
    except MatchdayError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
