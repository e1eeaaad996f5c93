"""
Match state machine for the recreation tic-tac-toe game.

Owns the board, move history and running score for one match, drives the
CPU opponent, and finalizes each round exactly once.

Phases:
    AWAITING_NAMES -> ROUND_IN_PROGRESS -> ROUND_ENDED -> ROUND_IN_PROGRESS
A new round keeps the score; restart_match() zeroes it and, in 2-player
mode, asks for names again.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from logic.game_state import Board, Mark, MatchMode, Outcome, PlayerNames
from logic.move_validator import MoveValidator
from logic.win_checker import Line, WinChecker
from logic.ai_player import AIPlayer, Difficulty
from reporting.result_reporter import ResultReporter

from .config import MatchConfig
from .latch import OneShotLatch
from .scheduler import ImmediateScheduler, Scheduler


logger = logging.getLogger(__name__)


class MatchPhase(Enum):
    AWAITING_NAMES = "awaiting_names"
    ROUND_IN_PROGRESS = "round_in_progress"
    ROUND_ENDED = "round_ended"


@dataclass
class MatchScore:
    """Running score of a match."""
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        if outcome == Outcome.X_WINS:
            self.x_wins += 1
        elif outcome == Outcome.O_WINS:
            self.o_wins += 1
        elif outcome == Outcome.DRAW:
            self.draws += 1
        else:
            raise ValueError("Cannot score an unfinished round")

    def reset(self) -> None:
        self.x_wins = 0
        self.o_wins = 0
        self.draws = 0


@dataclass
class RoundState:
    """
    The state of the current round.

    Tracks:
    - The board currently shown
    - Move history (index 0 is the empty board) and the shown step
    - Whose turn it is
    - Outcome and winning line of the shown board
    """
    start_player: Mark = Mark.X
    board: Board = field(default_factory=Board.empty)
    history: List[Board] = field(default_factory=lambda: [Board.empty()])
    step: int = 0
    current_turn: Mark = Mark.X
    outcome: Outcome = Outcome.IN_PROGRESS
    winning_line: Optional[Line] = None

    @classmethod
    def new(cls, start_player: Mark) -> "RoundState":
        return cls(start_player=start_player, current_turn=start_player)


class MatchStateMachine:
    """
    One tic-tac-toe match session.

    Game flow (CPU mode):
    1. Human (X) submits a move
    2. The board is locked and the CPU reply is scheduled
    3. After the thinking delay the CPU (O) move is applied
    4. Repeat until someone wins or it's a draw
    5. The round is scored and reported once
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        mode: Optional[MatchMode] = None,
        difficulty: Optional[Difficulty] = None,
        start_player: Optional[Mark] = None,
        engine: Optional[AIPlayer] = None,
        reporter: Optional[ResultReporter] = None,
        scheduler: Optional[Scheduler] = None
    ):
        """
        Initialize the match and start the first round.

        Args:
            config: Match configuration.
            mode: VS_CPU or LOCAL_2P (default from config).
            difficulty: CPU difficulty (default from config).
            start_player: Mark that moves first each round.
            engine: CPU opponent; must play config.CPU_MARK.
            reporter: Receives finished rounds.
            scheduler: Runs the delayed CPU move.
        """
        self.config = config or MatchConfig()
        self.mode = mode or self.config.DEFAULT_MODE
        self.difficulty = difficulty or self.config.DEFAULT_DIFFICULTY
        self.start_player = start_player or self.config.DEFAULT_START_PLAYER

        self.engine = engine or AIPlayer(self.config.CPU_MARK)
        self.reporter = reporter or ResultReporter()
        self.scheduler = scheduler or ImmediateScheduler()

        self.validator = MoveValidator()
        self.win_checker = WinChecker()

        self.score = MatchScore()
        self.x_name = ""
        self.o_name = ""
        self.names_locked = False

        # True while a CPU move is pending
        self.is_locked = False

        # Bumped whenever the shown position is replaced; a scheduled CPU
        # move from an older generation is dropped.
        self._generation = 0
        self._finalized = OneShotLatch()

        self.round = RoundState.new(self.start_player)
        self.phase = MatchPhase.ROUND_IN_PROGRESS
        self.start_round()

    # ==================== VIEW ====================

    @property
    def is_cpu(self) -> bool:
        return self.mode == MatchMode.VS_CPU

    @property
    def board(self) -> Board:
        return self.round.board

    @property
    def history(self) -> List[Board]:
        return list(self.round.history)

    @property
    def step(self) -> int:
        return self.round.step

    @property
    def current_turn(self) -> Mark:
        return self.round.current_turn

    @property
    def outcome(self) -> Outcome:
        return self.round.outcome

    @property
    def winning_line(self) -> Optional[Line]:
        return self.round.winning_line

    @property
    def x_label(self) -> str:
        if self.is_cpu:
            return self.config.CPU_MODE_X_LABEL
        return self.x_name or self.config.DEFAULT_X_NAME

    @property
    def o_label(self) -> str:
        if self.is_cpu:
            return self.config.CPU_MODE_O_LABEL
        return self.o_name or self.config.DEFAULT_O_NAME

    @property
    def player_names(self) -> PlayerNames:
        return PlayerNames(self.x_label, self.o_label)

    def label_for(self, mark: Mark) -> str:
        return self.x_label if mark == Mark.X else self.o_label

    @property
    def status_text(self) -> str:
        outcome = self.round.outcome
        if outcome == Outcome.DRAW:
            return "Draw!"
        if outcome.winner is not None:
            return f"{self.label_for(outcome.winner)} wins!"
        if self.phase == MatchPhase.AWAITING_NAMES:
            return "Enter player names to start"
        if self.is_cpu:
            if self.is_locked or self.round.current_turn == self.config.CPU_MARK:
                return "CPU is thinking..."
            return "Your turn"
        return f"{self.label_for(self.round.current_turn)}'s turn"

    # ==================== LIFECYCLE ====================

    def _awaiting_names(self) -> bool:
        return self.mode == MatchMode.LOCAL_2P and not self.names_locked

    def start_round(self) -> None:
        """Clear the board and start a new round. The score is kept."""
        self._generation += 1
        self._finalized.reset()
        self.is_locked = False
        self.round = RoundState.new(self.start_player)

        if self._awaiting_names():
            self.phase = MatchPhase.AWAITING_NAMES
            return

        self.phase = MatchPhase.ROUND_IN_PROGRESS
        logger.debug("Round started, %s moves first", self.start_player.value)
        self._maybe_trigger_cpu()

    def restart_match(self) -> None:
        """Zero the score, unlock player names and start over."""
        logger.info("Restarting match")
        self.score.reset()
        self.names_locked = False
        self.start_round()

    def set_player_names(self, x_name: str, o_name: str) -> bool:
        """
        Lock in the 2-player names and start the first round.

        Returns:
            False if names are already locked for this match.

        Raises:
            ValueError: Outside 2-player mode, or if a name is blank.
        """
        if self.mode != MatchMode.LOCAL_2P:
            raise ValueError("Player names are only used in 2-player mode")
        if self.names_locked:
            logger.debug("Names are locked until the match is restarted")
            return False
        if not x_name.strip() or not o_name.strip():
            raise ValueError("Both player names are required")

        self.x_name = x_name.strip()
        self.o_name = o_name.strip()
        self.names_locked = True
        self.start_round()
        return True

    def set_mode(self, mode: MatchMode) -> None:
        """Switch between CPU and 2-player play. Starts a new round."""
        if mode == self.mode:
            return
        self.mode = mode
        if mode == MatchMode.LOCAL_2P:
            self.names_locked = False
        self.start_round()

    def set_difficulty(self, difficulty: Union[Difficulty, str]) -> None:
        """Takes effect from the next CPU move."""
        if isinstance(difficulty, str):
            difficulty = Difficulty.from_name(difficulty)
        self.difficulty = difficulty

    def set_start_player(self, mark: Mark) -> None:
        self.start_player = mark
        self.start_round()

    # ==================== MOVES ====================

    def submit_move(self, position: int) -> bool:
        """
        Play a move for the side at the board.

        Illegal input (occupied cell, wrong turn, CPU thinking, round over)
        is ignored.

        Returns:
            True if the move was applied.
        """
        if self.phase == MatchPhase.AWAITING_NAMES:
            logger.debug("Ignored move %r: waiting for player names", position)
            return False

        mark = self.config.HUMAN_MARK if self.is_cpu else self.round.current_turn
        result = self.validator.validate_move(
            self.round.board,
            position,
            mark,
            self.round.current_turn,
            game_ended=self.phase == MatchPhase.ROUND_ENDED,
            engine_busy=self.is_locked
        )
        if not result.is_valid:
            logger.debug("Ignored move %r: %s", position, result.error_message)
            return False

        self._apply_move(position, mark)
        return True

    def _apply_move(self, position: int, mark: Mark) -> None:
        r = self.round
        board = r.board.apply_mark(position, mark)
        outcome = self.win_checker.evaluate(board)

        # A move after jumping back overwrites the later snapshots
        r.history = r.history[:r.step + 1] + [board]
        r.step += 1
        r.board = board
        r.outcome = outcome
        r.winning_line = self.win_checker.get_winning_line(board) if outcome.winner else None
        r.current_turn = self.validator.turn_after(mark, outcome)

        logger.debug("%s -> %d: %s (%s)", mark.value, position, board, outcome.value)

        if outcome.is_terminal:
            self.phase = MatchPhase.ROUND_ENDED
            self.finalize_round()
            return

        self._maybe_trigger_cpu()

    def _maybe_trigger_cpu(self) -> None:
        if not self.is_cpu or self.phase != MatchPhase.ROUND_IN_PROGRESS:
            return
        if self.round.current_turn != self.config.CPU_MARK or self.is_locked:
            return

        self.is_locked = True
        generation = self._generation
        board = self.round.board
        logger.debug("CPU is thinking...")
        self.scheduler.call_later(
            self.config.THINK_DELAY_MS,
            lambda: self._cpu_move(generation, board)
        )

    def _cpu_move(self, generation: int, board: Board) -> None:
        """Apply the CPU reply scheduled for `board`."""
        if generation != self._generation:
            logger.debug("Dropped CPU move for a replaced position")
            return

        move = self.engine.choose_move(board, self.difficulty)
        self.is_locked = False
        if move is None:
            return

        self._apply_move(move, self.config.CPU_MARK)

    def jump_to_move(self, index: int) -> None:
        """
        Show history snapshot `index`.

        A finished snapshot is not scored or reported again. Playing a move
        from an earlier snapshot discards the snapshots after it.

        Raises:
            IndexError: If there is no such snapshot.
        """
        r = self.round
        if not 0 <= index < len(r.history):
            raise IndexError(f"No move #{index} (history has {len(r.history)} entries)")

        snapshot = r.history[index]
        outcome = self.win_checker.evaluate(snapshot)

        self._generation += 1
        self.is_locked = False

        r.board = snapshot
        r.step = index
        r.outcome = outcome
        r.winning_line = self.win_checker.get_winning_line(snapshot) if outcome.winner else None
        turn = snapshot.next_turn(r.start_player)
        r.current_turn = turn.opposite() if outcome.is_terminal else turn

        if outcome.is_terminal:
            self.phase = MatchPhase.ROUND_ENDED
            return

        if self._awaiting_names():
            self.phase = MatchPhase.AWAITING_NAMES
            return

        self.phase = MatchPhase.ROUND_IN_PROGRESS
        self._maybe_trigger_cpu()

    # ==================== FINALIZATION ====================

    def finalize_round(self) -> bool:
        """
        Score and report the current round if it is over.

        Safe to call any number of times: only the first call in a round
        has an effect.

        Returns:
            True if this call scored the round.
        """
        outcome = self.win_checker.evaluate(self.round.board)
        if not outcome.is_terminal:
            return False
        if not self._finalized.try_acquire():
            logger.debug("Round already finalized")
            return False

        self.phase = MatchPhase.ROUND_ENDED
        self.score.record(outcome)
        logger.info(
            "%s | score X=%d O=%d draws=%d",
            self.status_text, self.score.x_wins, self.score.o_wins, self.score.draws
        )
        self.reporter.report_round_result(outcome, self.mode, self.difficulty, self.player_names)
        return True
