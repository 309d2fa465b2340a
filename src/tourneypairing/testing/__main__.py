"""Command-line interface for Tourney Pairing.

This module provides a standard command-line mode for running simulated
tournaments and an interactive shell for running a live event by hand.
"""

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

import argparse
import json
import shlex
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from tourneypairing.constants import (
    FORMATS,
    SORT_ASCENDING,
    SORT_NONE,
    SWISS_PAIRING_MODES,
    TIEBREAK_NAMES,
)
from tourneypairing.exceptions import TourneyPairingException
from tourneypairing.models import Match, TournamentConfig
from tourneypairing.player import Player
from tourneypairing.testing.rtg import (
    RandomTournamentGenerator,
    RatingDistribution,
    ResultPattern,
    RTGConfig,
)
from tourneypairing.tournament import EventManager, Tournament
from tourneypairing.utils import setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Shell command definitions with their options
COMMANDS = {
    "new": {
        "description": "Create a tournament: new <format>",
        "options": {
            "--name": "Tournament name",
            "--rounds": "Swiss round count (default: ceil(log2(players)))",
            "--best-of": "Games per match (default: 1)",
            "--seeded": "Order players by seed (1 is best)",
            "--pairing": "Swiss pairing mode (adjacent/fold)",
            "--colors": "Balance sides",
            "--no-repeats": "Fail instead of pairing a rematch",
            "--double": "Double round-robin or double elimination",
            "--third-place": "Play off the semifinal losers",
            "--reset": "Bracket reset in double elimination",
        },
    },
    "add": {
        "description": "Add a player: add <alias>",
        "options": {
            "--seed": "Seed value",
            "--byes": "Opening rounds with a bye",
        },
    },
    "drop": {"description": "Drop a player: drop <alias>", "options": {}},
    "start": {"description": "Start the next round", "options": {}},
    "result": {
        "description": "Record a result: result <match> <p1 wins> <p2 wins> [draws]",
        "options": {"--round": "Round of the match (default: current)"},
    },
    "clear": {
        "description": "Clear a result: clear <match>",
        "options": {"--round": "Round of the match (default: current)"},
    },
    "pairings": {
        "description": "Show a round's matches: pairings [round]",
        "options": {},
    },
    "standings": {
        "description": "Show standings",
        "options": {"--active": "Leave dropped players out"},
    },
    "export": {"description": "Save the tournament: export <file>", "options": {}},
    "load": {"description": "Load a tournament: load <file>", "options": {}},
    "simulate": {
        "description": "Run a simulated tournament (RTG)",
        "options": {
            "--format": "swiss/round_robin/elimination (default: swiss)",
            "--players": "Number of players (default: 16)",
            "--rounds": "Swiss round count",
            "--distribution": "Rating distribution (uniform/normal/skewed/club)",
            "--pattern": "Result pattern (realistic/upset_friendly/random)",
            "--seed": "Random seed for reproducibility",
            "--best-of": "Games per match (default: 3)",
            "--drop-rate": "Chance per player per round of dropping",
            "--double": "Double round-robin or double elimination",
            "--output": "Write the result as JSON",
        },
    },
}


def print_banner() -> None:
    """Print the application banner."""
    print(
        f"""
{Colors.OKBLUE}Tourney Pairing - interactive shell{Colors.ENDC}

Type {Colors.BOLD}help{Colors.ENDC} to see all available commands
Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave
"""
    )


def print_commands_list() -> None:
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:12}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str) -> None:
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")
    if cmd_info["options"]:
        print(f"{Colors.BOLD}Options:{Colors.ENDC}")
        for option, description in cmd_info["options"].items():
            print(f"  {Colors.OKCYAN}{option:16}{Colors.ENDC} {description}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions: Dict[str, Optional[WordCompleter]] = {}
    for cmd, info in COMMANDS.items():
        completions[cmd] = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
    completions["new"] = WordCompleter(
        list(FORMATS) + list(COMMANDS["new"]["options"].keys())
    )
    completions["help"] = WordCompleter(list(COMMANDS.keys()))
    completions["exit"] = None
    return NestedCompleter.from_nested_dict(completions)


# ========== Parsers ==========


def create_new_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="new", description="Create a tournament")
    parser.add_argument("format", choices=FORMATS)
    parser.add_argument("--name", default="Untitled Tournament")
    parser.add_argument("--rounds", type=int, default=None)
    parser.add_argument("--best-of", type=int, default=1)
    parser.add_argument("--seeded", action="store_true")
    parser.add_argument("--pairing", choices=SWISS_PAIRING_MODES, default="adjacent")
    parser.add_argument("--colors", action="store_true")
    parser.add_argument("--no-repeats", action="store_true")
    parser.add_argument("--double", action="store_true")
    parser.add_argument("--third-place", action="store_true")
    parser.add_argument("--reset", action="store_true")
    return parser


def create_add_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="add", description="Add a player")
    parser.add_argument("alias")
    parser.add_argument("--seed", type=float, default=None)
    parser.add_argument("--byes", type=int, default=0)
    return parser


def create_match_parser(prog: str, with_score: bool) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog)
    parser.add_argument("match", type=int, help="Match number within the round")
    if with_score:
        parser.add_argument("p1_wins", type=int)
        parser.add_argument("p2_wins", type=int)
        parser.add_argument("draws", type=int, nargs="?", default=0)
    parser.add_argument("--round", type=int, default=None)
    return parser


def add_simulate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--format", choices=FORMATS, default="swiss")
    parser.add_argument("--players", type=int, default=16)
    parser.add_argument("--rounds", type=int, default=None)
    parser.add_argument(
        "--distribution",
        choices=[d.value for d in RatingDistribution],
        default=RatingDistribution.NORMAL.value,
    )
    parser.add_argument(
        "--pattern",
        choices=[p.value for p in ResultPattern],
        default=ResultPattern.REALISTIC.value,
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--best-of", type=int, default=3)
    parser.add_argument("--drop-rate", type=float, default=0.0)
    parser.add_argument("--double", action="store_true")
    parser.add_argument("--output", default=None)


def create_simulate_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simulate", description="Run a simulation")
    add_simulate_arguments(parser)
    return parser


# ========== Commands ==========


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run the simulate (RTG) command."""
    config = RTGConfig(
        num_players=args.players,
        format=args.format,
        num_rounds=args.rounds,
        rating_distribution=RatingDistribution(args.distribution),
        result_pattern=ResultPattern(args.pattern),
        seed=args.seed,
        best_of=args.best_of,
        drop_rate=args.drop_rate,
        double_round_robin=args.double,
        double_elimination=args.double,
    )
    print(f"\n{Colors.BOLD}Simulating {config.format} tournament...{Colors.ENDC}")
    rtg = RandomTournamentGenerator(config)
    tournament_data = rtg.generate_complete_tournament()

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(rtg.export_json_format(tournament_data), encoding="utf-8")
        print(f"{Colors.OKGREEN}Tournament saved to: {output_path}{Colors.ENDC}")

    tournament: Tournament = tournament_data["tournament"]
    checks = tournament_data["checks"]
    print(f"\n{Colors.BOLD}Tournament Simulated:{Colors.ENDC}")
    print(f"  Players: {len(tournament.players)}")
    print(f"  Rounds: {checks['rounds']}")
    print(f"  Matches played: {checks['matches']}")
    print(f"  Repeat pairings: {checks['repeat_pairings']}")
    print(f"  Players with several byes: {len(checks['multiple_byes'])}")
    if checks["double_booked"]:
        print(f"  {Colors.FAIL}Double booked: {checks['double_booked']}{Colors.ENDC}")
    warnings = [w for r in tournament_data["rounds"] for w in r["warnings"]]
    for warning in warnings:
        print(f"  {Colors.WARNING}{warning}{Colors.ENDC}")

    winner = tournament.get_player(tournament_data["standings"][0])
    print(f"  Winner: {winner.alias} ({winner.match_points:g})")
    return 0 if not checks["double_booked"] else 1


class TournamentShell:
    """Drives one live tournament from text commands."""

    def __init__(self, manager: Optional[EventManager] = None) -> None:
        self.manager = manager or EventManager()
        self.tournament: Optional[Tournament] = None
        self.handlers: Dict[str, Callable[[List[str]], None]] = {
            "new": self.do_new,
            "add": self.do_add,
            "drop": self.do_drop,
            "start": self.do_start,
            "result": self.do_result,
            "clear": self.do_clear,
            "pairings": self.do_pairings,
            "standings": self.do_standings,
            "export": self.do_export,
            "load": self.do_load,
            "simulate": self.do_simulate,
        }

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
            if not parts:
                return True
            command, args_list = parts[0].lstrip("/"), parts[1:]

            if command in ("exit", "quit", "q"):
                return False
            if command in ("help", "?"):
                if args_list:
                    print_command_help(args_list[0])
                else:
                    print_commands_list()
                return True
            if command not in self.handlers:
                print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
                print(f"Type {Colors.BOLD}help{Colors.ENDC} to see available commands")
                return True

            self.handlers[command](args_list)
        except SystemExit:
            # argparse exits on bad arguments
            pass
        except TourneyPairingException as e:
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        except Exception as e:
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
            logger.exception("Command execution failed")
        return True

    def _require(self) -> Tournament:
        if self.tournament is None:
            raise TourneyPairingException("No tournament, create one with 'new'")
        return self.tournament

    def _find_player(self, name: str) -> Player:
        tournament = self._require()
        if name in tournament.players:
            return tournament.players[name]
        for player in tournament.players.values():
            if player.alias == name:
                return player
        return tournament.get_player(name)

    def _find_match(self, number: int, round_number: Optional[int]) -> Match:
        tournament = self._require()
        round_number = round_number or tournament.current_round
        for match in tournament.matches_for_round(round_number):
            if match.match_number == number:
                return match
        raise TourneyPairingException(f"No match {number} in round {round_number}")

    def _describe(self, match: Match) -> str:
        tournament = self._require()

        def name(player_id: Optional[str]) -> str:
            return tournament.players[player_id].alias if player_id else "-"

        if match.bye:
            status = "void" if match.is_void else "bye"
        elif match.completed:
            status = f"{match.player_one_wins}-{match.player_two_wins}-{match.draws}"
        else:
            status = "open" if match.active else "pending"
        return (
            f"  {match.match_number:3}. {name(match.player_one):>16} vs "
            f"{name(match.player_two):<16} [{status}]"
        )

    def do_new(self, args_list: List[str]) -> None:
        args = create_new_parser().parse_args(args_list)
        config = TournamentConfig(
            name=args.name,
            format=args.format,
            num_rounds=args.rounds,
            best_of=args.best_of,
            sorting=SORT_ASCENDING if args.seeded else SORT_NONE,
            swiss_pairing=args.pairing,
            colors=args.colors,
            allow_repeat_pairings=not args.no_repeats,
            double_round_robin=args.double,
            double_elimination=args.double,
            third_place_match=args.third_place,
            bracket_reset=args.reset,
        )
        self.tournament = self.manager.create_tournament(config)
        print(f"Created {args.format} tournament {self.tournament.id}")

    def do_add(self, args_list: List[str]) -> None:
        args = create_add_parser().parse_args(args_list)
        player = self._require().create_player(
            args.alias, seed=args.seed, initial_byes=args.byes
        )
        print(f"Added {player.alias} ({player.id})")

    def do_drop(self, args_list: List[str]) -> None:
        if not args_list:
            print_command_help("drop")
            return
        player = self._find_player(" ".join(args_list))
        self._require().drop_player(player.id)
        print(f"Dropped {player.alias}")

    def do_start(self, args_list: List[str]) -> None:
        result = self._require().start_round()
        print(f"\n{Colors.BOLD}Round {result.round_number}{Colors.ENDC}")
        for match in result.matches:
            print(self._describe(match))
        for warning in result.warnings:
            print(f"{Colors.WARNING}{warning}{Colors.ENDC}")

    def do_result(self, args_list: List[str]) -> None:
        args = create_match_parser("result", with_score=True).parse_args(args_list)
        match = self._find_match(args.match, args.round)
        self._require().submit_result(match.id, args.p1_wins, args.p2_wins, args.draws)
        print(self._describe(match))
        if self._require().tournament_over:
            print(f"{Colors.OKGREEN}Tournament complete{Colors.ENDC}")

    def do_clear(self, args_list: List[str]) -> None:
        args = create_match_parser("clear", with_score=False).parse_args(args_list)
        match = self._find_match(args.match, args.round)
        self._require().clear_result(match.id)
        print(self._describe(match))

    def do_pairings(self, args_list: List[str]) -> None:
        tournament = self._require()
        round_number = int(args_list[0]) if args_list else tournament.current_round
        print(f"\n{Colors.BOLD}Round {round_number}{Colors.ENDC}")
        for match in tournament.matches_for_round(round_number):
            print(self._describe(match))

    def do_standings(self, args_list: List[str]) -> None:
        tournament = self._require()
        order = tournament.config.effective_tiebreak_order
        players = tournament.standings(active_only="--active" in args_list)
        header = "  ".join(f"{TIEBREAK_NAMES[key][:12]:>12}" for key in order)
        print(f"\n{'#':>3} {'Player':<20} {'Pts':>5}  {header}")
        for rank, player in enumerate(players, start=1):
            values = "  ".join(
                f"{player.tiebreakers.get(key, 0.0):>12.4f}" if key in player.tiebreakers
                else f"{'':>12}"
                for key in order
            )
            flag = "" if player.active else " (dropped)"
            print(f"{rank:>3} {player.alias + flag:<20} {player.match_points:>5g}  {values}")

    def do_export(self, args_list: List[str]) -> None:
        if not args_list:
            print_command_help("export")
            return
        path = Path(args_list[0])
        path.write_text(json.dumps(self._require().to_dict(), indent=2), encoding="utf-8")
        print(f"{Colors.OKGREEN}Tournament saved to: {path}{Colors.ENDC}")

    def do_load(self, args_list: List[str]) -> None:
        if not args_list:
            print_command_help("load")
            return
        data = json.loads(Path(args_list[0]).read_text(encoding="utf-8"))
        self.tournament = self.manager.reload_tournament(data)
        print(f"Loaded {self.tournament.name} at round {self.tournament.current_round}")

    def do_simulate(self, args_list: List[str]) -> None:
        run_simulate_command(create_simulate_parser().parse_args(args_list))


def run_interactive_mode() -> int:
    """Run in interactive mode with autocomplete."""
    print_banner()
    shell = TournamentShell()
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt("tourney> ").strip()
            if not shell.execute(user_input):
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break
    return 0


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tourney-pairing",
        description="Tournament pairing engine: simulations and an interactive shell",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  tourney-pairing interactive

  # Simulate a Swiss event
  tourney-pairing simulate --players 24 --seed 7

  # Simulate a double elimination bracket
  tourney-pairing simulate --format elimination --double --players 12
        """,
    )
    parser.add_argument("--log-level", default=None, help="Logging level for output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    sim_parser = subparsers.add_parser("simulate", help="Run a simulated tournament")
    add_simulate_arguments(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    int_parser = subparsers.add_parser("interactive", help="Start the interactive shell")
    int_parser.set_defaults(func=lambda args: run_interactive_mode())
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the tourney-pairing CLI."""
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        import logging

        logging.basicConfig(level=args.log_level.upper())

    if not hasattr(args, "func"):
        return run_interactive_mode()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
