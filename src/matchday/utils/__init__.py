"""Utility helpers shared across Matchday."""

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

import logging
import sys
from itertools import combinations
from typing import FrozenSet, Iterable, List

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CLI_HANDLER_FLAG = "_matchday_cli"


def setup_logger(name: str, level: int = logging.NOTSET) -> logging.Logger:
    """Return a module logger under the ``matchday`` hierarchy.

    Handlers are only attached to the package root logger, once, so
    applications embedding the engine keep control of output.
    """
    root = logging.getLogger("matchday")
    if not root.handlers:
        root.addHandler(logging.NullHandler())

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level)
    return logger


def configure_logging(verbose: bool = False) -> None:
    """Attach a stream handler to the package logger (CLI use)."""
    root = logging.getLogger("matchday")
    # The previous stream may already be closed, so it is detached unflushed.
    for old in [h for h in root.handlers if getattr(h, CLI_HANDLER_FLAG, False)]:
        root.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, CLI_HANDLER_FLAG, True)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def pair_key(player1: str, player2: str) -> FrozenSet[str]:
    """Unordered key for two players."""
    return frozenset({player1, player2})


def team_pairs(players: Iterable[str]) -> List[FrozenSet[str]]:
    """All unordered teammate pairs in one team, ignoring blank entries."""
    valid = [p for p in players if isinstance(p, str) and p.strip()]
    return [pair_key(a, b) for a, b in combinations(valid, 2)]
