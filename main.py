"""
Console front end for the recreation games.

This script ties together:
- Logic (board, move validation, CPU opponent)
- Match control (rounds, score, history, CPU timing)
- Reporting (win counter, game log)

Run this script to play tic-tac-toe or hangman in a terminal!
"""

import argparse
import random
import logging
from typing import Callable, Optional

from logic.game_state import Mark, MatchMode
from logic.ai_player import AIPlayer, Difficulty
from match_control.config import MatchConfig
from match_control.match_state import MatchPhase, MatchStateMachine
from match_control.scheduler import BlockingScheduler
from reporting.win_counter import RecreationStats
from reporting.match_log import InMemoryMatchLog, JsonlMatchLog
from reporting.result_reporter import ResultReporter
from hangman.game import HangmanGame


HELP_TEXT = """Commands:
  0-8      mark a cell
  n        new round (score kept)
  r        restart match (score zeroed)
  j N      jump to move N
  d LEVEL  difficulty: easy, normal, hard
  s X|O    who starts each round
  m        switch CPU / 2-player
  h        this help
  q        quit"""


class TicTacToeConsole:
    """
    Text front end for a tic-tac-toe match.

    Game flow:
    1. Player types a cell number
    2. The match applies it (illegal input is ignored)
    3. In CPU mode the CPU replies after a short pause
    4. The board, status and score are printed again
    """

    def __init__(
        self,
        match: MatchStateMachine,
        stats: RecreationStats,
        read: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None
    ):
        self.match = match
        self.stats = stats
        self.read = read or input
        self.write = write or print
        self.is_running = False

    def start(self):
        """Start the game loop."""
        self.write("\n" + "=" * 40)
        self.write("   Tic-Tac-Toe")
        self.write("=" * 40)
        self.write(HELP_TEXT)

        self.is_running = True
        while self.is_running:
            if self.match.phase == MatchPhase.AWAITING_NAMES:
                self._ask_names()
                continue

            self._show()
            try:
                line = self.read("> ").strip()
            except EOFError:
                break
            self.handle_command(line)

        self.write("Bye!")

    def _ask_names(self):
        try:
            x_name = self.read("Player X name: ")
            o_name = self.read("Player O name: ")
        except EOFError:
            self.is_running = False
            return
        try:
            self.match.set_player_names(x_name, o_name)
        except ValueError as e:
            self.write(f"ERROR: {e}")

    def _show(self):
        m = self.match
        self.write("")
        self.write(m.board.render())
        self.write("")
        self.write(m.status_text)
        if m.winning_line:
            self.write(f"Winning line: {list(m.winning_line)}")
        self.write(
            f"{m.x_label}: {m.score.x_wins}  {m.o_label}: {m.score.o_wins}  "
            f"Draws: {m.score.draws}  (move {m.step}/{len(m.history) - 1})"
        )

    def handle_command(self, line: str):
        """Run one console command."""
        if not line:
            return

        cmd, _, arg = line.partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        if cmd.isdigit():
            if not self.match.submit_move(int(cmd)):
                self.write("Move ignored.")
        elif cmd == "n":
            self.match.start_round()
        elif cmd == "r":
            self.match.restart_match()
        elif cmd == "j":
            try:
                self.match.jump_to_move(int(arg))
            except (ValueError, IndexError) as e:
                self.write(f"ERROR: {e}")
        elif cmd == "d":
            try:
                self.match.set_difficulty(arg)
                self.write(f"Difficulty set to: {self.match.difficulty.value}")
            except ValueError as e:
                self.write(f"ERROR: {e}")
        elif cmd == "s" and arg.upper() in ("X", "O"):
            self.match.set_start_player(Mark(arg.upper()))
        elif cmd == "m":
            new_mode = MatchMode.LOCAL_2P if self.match.is_cpu else MatchMode.VS_CPU
            self.match.set_mode(new_mode)
            self.write(f"Mode: {new_mode.value}")
        elif cmd == "h":
            self.write(HELP_TEXT)
        elif cmd == "q":
            self.write(f"Tic-tac-toe wins this session: {self.stats.get_wins(ResultReporter.TIC_TAC_TOE_KEY)}")
            self.is_running = False
        else:
            self.write("Unknown command. Type h for help.")


class HangmanConsole:
    """Text front end for hangman. Each guess costs one second of the clock."""

    def __init__(
        self,
        game: HangmanGame,
        read: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None
    ):
        self.game = game
        self.read = read or input
        self.write = write or print

    def start(self):
        g = self.game
        self.write(f"\nHangman! Category: {g.word_data.category} ({g.difficulty})")
        self.write("Type a letter, '?' for a hint, 'q' to quit.")

        while not g.game_over:
            self.write(f"\n{g.masked_word}   wrong: {g.wrong_guesses}/{g.config.MAX_WRONG}   time: {g.time_left}s")
            try:
                line = self.read("> ").strip()
            except EOFError:
                return
            if line == "q":
                return
            if line == "?":
                self.write(f"Hint: {g.show_hint()}")
                continue
            if not g.guess(line):
                self.write("Guess ignored.")
            g.tick()

        if g.won:
            self.write(f"\nYou won! The word was {g.word}. Score: {g.calculate_score('won')}")
        else:
            self.write(f"\nGame over ({g.result}). The word was {g.word}.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recreation games (console)")
    parser.add_argument(
        "--game",
        choices=["tictactoe", "hangman"],
        default="tictactoe",
        help="Game to play"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in MatchMode],
        default=MatchConfig.DEFAULT_MODE.value,
        help="Play the CPU or a local second player"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=MatchConfig.DEFAULT_DIFFICULTY.value,
        help="CPU difficulty"
    )
    parser.add_argument(
        "--start",
        choices=["X", "O"],
        default=MatchConfig.DEFAULT_START_PLAYER.value,
        help="Mark that moves first each round"
    )
    parser.add_argument(
        "--think-ms",
        type=int,
        default=MatchConfig.THINK_DELAY_MS,
        help="CPU thinking pause in milliseconds"
    )
    parser.add_argument("--user", default="local", help="User id for the win counter")
    parser.add_argument("--log-file", default=None, help="Append finished games to this JSON Lines file")
    parser.add_argument("--seed", type=int, default=None, help="Seed for CPU and word choice")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    rng = random.Random(args.seed)

    stats = RecreationStats(uid=args.user)
    match_log = JsonlMatchLog(args.log_file) if args.log_file else InMemoryMatchLog()
    reporter = ResultReporter(win_counter=stats, match_log=match_log, uid=args.user)

    if args.game == "hangman":
        HangmanConsole(HangmanGame(rng=rng, reporter=reporter)).start()
        return 0

    config = MatchConfig()
    config.THINK_DELAY_MS = max(0, args.think_ms)

    match = MatchStateMachine(
        config=config,
        mode=MatchMode(args.mode),
        difficulty=Difficulty(args.difficulty),
        start_player=Mark(args.start),
        engine=AIPlayer(config.CPU_MARK, rng=rng),
        reporter=reporter,
        scheduler=BlockingScheduler()
    )
    TicTacToeConsole(match, stats).start()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
