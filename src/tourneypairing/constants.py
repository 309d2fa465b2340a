# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
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
ID_LENGTH = 16
LOG_LEVEL_ENV_VAR = "TOURNEY_PAIRING_LOG_LEVEL"

# Default point values
WIN_VALUE = 1.0
DRAW_VALUE = 0.5
LOSS_VALUE = 0.0

# Match outcomes (stored on player result entries)
OUTCOME_WIN = "win"
OUTCOME_LOSS = "loss"
OUTCOME_DRAW = "draw"

# Sides. "one" is the white analog, "two" the black analog.
SIDE_ONE = "one"
SIDE_TWO = "two"

# Formats
FORMAT_SWISS = "swiss"
FORMAT_ROUND_ROBIN = "round_robin"
FORMAT_ELIMINATION = "elimination"
FORMATS = (FORMAT_SWISS, FORMAT_ROUND_ROBIN, FORMAT_ELIMINATION)

# Seed sorting
SORT_NONE = "none"
SORT_ASCENDING = "ascending"
SORT_DESCENDING = "descending"
SORTINGS = (SORT_NONE, SORT_ASCENDING, SORT_DESCENDING)

# Swiss pairing modes
SWISS_ADJACENT = "adjacent"  # 1v2, 3v4, ...
SWISS_FOLD = "fold"  # top half vs bottom half of each score group
SWISS_PAIRING_MODES = (SWISS_ADJACENT, SWISS_FOLD)
DEFAULT_SWISS_SEARCH_LIMIT = 20000

# Bracket labels
BRACKET_MAIN = "main"
BRACKET_WINNERS = "winners"
BRACKET_LOSERS = "losers"
BRACKET_GRAND_FINAL = "grand_final"
BRACKET_RESET = "reset"
BRACKET_THIRD_PLACE = "third_place"

# Match-win-percentage floors
MTG_PCT_FLOOR = 1.0 / 3.0
POKEMON_PCT_FLOOR = 0.25

# Tiebreaker keys
TB_MATCH_WIN_PCT_M = "match_win_pct_m"
TB_MATCH_WIN_PCT_P = "match_win_pct_p"
TB_OPP_MATCH_WIN_PCT_M = "opp_match_win_pct_m"
TB_OPP_MATCH_WIN_PCT_P = "opp_match_win_pct_p"
TB_GAME_WIN_PCT = "game_win_pct"
TB_OPP_GAME_WIN_PCT = "opp_game_win_pct"
TB_OPP_OPP_MATCH_WIN_PCT = "opp_opp_match_win_pct"
TB_SOLKOFF = "solkoff"
TB_MEDIAN = "median"
TB_CUT_ONE = "cut_one"
TB_NEUSTADTL = "neustadtl"
TB_CUMULATIVE = "cumulative"
TB_OPP_CUMULATIVE = "opp_cumulative"
TB_VERSUS = "versus"  # Comparison key only, never stored

# Keys the calculator stores on every player
COMPUTED_TIEBREAKS = (
    TB_MATCH_WIN_PCT_M,
    TB_MATCH_WIN_PCT_P,
    TB_OPP_MATCH_WIN_PCT_M,
    TB_OPP_MATCH_WIN_PCT_P,
    TB_GAME_WIN_PCT,
    TB_OPP_GAME_WIN_PCT,
    TB_OPP_OPP_MATCH_WIN_PCT,
    TB_SOLKOFF,
    TB_MEDIAN,
    TB_CUT_ONE,
    TB_NEUSTADTL,
    TB_CUMULATIVE,
    TB_OPP_CUMULATIVE,
)

TIEBREAK_KEYS = COMPUTED_TIEBREAKS + (TB_VERSUS,)

# Default display names for tiebreaks
TIEBREAK_NAMES = {
    TB_MATCH_WIN_PCT_M: "Match Win %",
    TB_MATCH_WIN_PCT_P: "Match Win % (no byes)",
    TB_OPP_MATCH_WIN_PCT_M: "Opp Match Win %",
    TB_OPP_MATCH_WIN_PCT_P: "Opp Match Win % (no byes)",
    TB_GAME_WIN_PCT: "Game Win %",
    TB_OPP_GAME_WIN_PCT: "Opp Game Win %",
    TB_OPP_OPP_MATCH_WIN_PCT: "Opp Opp Match Win %",
    TB_SOLKOFF: "Solkoff",
    TB_MEDIAN: "Median",
    TB_CUT_ONE: "Cut-1",
    TB_NEUSTADTL: "Neustadtl",
    TB_CUMULATIVE: "Cumulative",
    TB_OPP_CUMULATIVE: "Cumulative Opp",
    TB_VERSUS: "Head-to-Head",
}

# Default order used for sorting if not configured otherwise
DEFAULT_SWISS_TIEBREAK_ORDER = [
    TB_OPP_MATCH_WIN_PCT_M,
    TB_GAME_WIN_PCT,
    TB_OPP_GAME_WIN_PCT,
    TB_OPP_OPP_MATCH_WIN_PCT,
]

DEFAULT_ROUND_ROBIN_TIEBREAK_ORDER = [
    TB_VERSUS,
    TB_NEUSTADTL,
    TB_GAME_WIN_PCT,
]

DEFAULT_ELIMINATION_TIEBREAK_ORDER = [
    TB_SOLKOFF,
    TB_GAME_WIN_PCT,
]

DEFAULT_TIEBREAK_ORDERS = {
    FORMAT_SWISS: DEFAULT_SWISS_TIEBREAK_ORDER,
    FORMAT_ROUND_ROBIN: DEFAULT_ROUND_ROBIN_TIEBREAK_ORDER,
    FORMAT_ELIMINATION: DEFAULT_ELIMINATION_TIEBREAK_ORDER,
}
