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

# --- Constants ---
SCHEMA_VERSION = 2

# League table points
WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0

# Expected-score outcomes used by the rating model
WIN_SCORE = 1.0
DRAW_SCORE = 0.5
LOSS_SCORE = 0.0

# Team generation methods
METHOD_RANDOM = "random"
METHOD_SEEDED = "seeded"
GENERATION_METHODS = (METHOD_RANDOM, METHOD_SEEDED)

# Team generation limits (league defaults)
DEFAULT_MIN_TEAMS = 2
DEFAULT_MAX_TEAMS = 5
DEFAULT_MIN_PLAYERS_PER_TEAM = 5
DEFAULT_MAX_PLAYERS_PER_TEAM = 7
DEFAULT_PLAYER_LIMIT = 24

# Teammate history
DEFAULT_HISTORY_WINDOW = 12

# Swap search after a seeded draft
DEFAULT_MAX_IMPROVING_SWAPS = 20
DEFAULT_MAX_SWAP_EVALUATIONS = 2000
DEFAULT_BALANCE_TOLERANCE = 0.05  # fraction of the pool's strength range

# Team names: "<Colour> <Noun>"
TEAM_COLOURS = ["Blue", "White", "Orange", "Green", "Black", "Red", "Purple", "Yellow"]
TEAM_NOUNS = [
    "Badgers",
    "Comets",
    "Falcons",
    "Foxes",
    "Hornets",
    "Jackals",
    "Lions",
    "Otters",
    "Panthers",
    "Ravens",
    "Rockets",
    "Sharks",
    "Stags",
    "Tigers",
    "Vipers",
    "Wolves",
]

# Knockout
BYE = "BYE"
ROUND_FINAL = "final"
ROUND_SEMI = "semi"
ROUND_QUARTER = "quarter"
# Named rounds keyed by the number of slots in that round
ROUND_NAMES = {2: ROUND_FINAL, 4: ROUND_SEMI, 8: ROUND_QUARTER}
ROUND_OF_PREFIX = "round-of-"

# Rating (ELO-style)
RATING_BASELINE = 1000.0
RATING_SCALE = 400.0
RATING_K_LEAGUE = 10.0
RATING_K_CUP = 7.0
RATING_DECAY_RATE = 0.02  # per whole week, toward the baseline
PHASE_LEAGUE = "league"
PHASE_CUP = "cup"

# Provisional ratings for newcomers
PROVISIONAL_THRESHOLD = 5
PROVISIONAL_ANCHOR_FACTOR = 0.99

# Ranking points
APPEARANCE_POINTS = 1
BONUS_MULTIPLIER = 2
KNOCKOUT_MULTIPLIER = 4
CONFIDENCE_FRACTION = 0.66
PULL_STRENGTH = 1.0

# "Active" players
ACTIVE_MIN_APPEARANCES = 2
ACTIVE_WINDOW_MONTHS = 2

# Scorer bookkeeping
MAX_OWN_GOALS = 2

# Persistence categories used by the request adapter
CATEGORY_TEAMS = "teams"
CATEGORY_GAMES = "games"
CATEGORY_DRAW_HISTORY = "draw-history"
KNOCKOUT_GAMES_KEY = "knockout-games"
