"""
CPU opponent for the recreation tic-tac-toe game.
Picks moves by difficulty: random, heuristic, or full Minimax.
"""

import logging
import random
from enum import Enum
from typing import Optional, Dict, List
from .game_state import Board, Mark, Outcome
from .win_checker import WinChecker


logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """CPU difficulty levels."""
    EASY = "easy"        # Random moves
    NORMAL = "normal"    # Win, block, then center/corner/side
    HARD = "hard"        # Full minimax

    @classmethod
    def from_name(cls, name: str) -> "Difficulty":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown difficulty {name!r}. Choose from: "
                + ", ".join(d.value for d in cls)
            ) from None


CENTER = 4
CORNERS = (0, 2, 6, 8)
SIDES = (1, 3, 5, 7)

WIN_SCORE = 10


class AIPlayer:
    """
    The automated side of a tic-tac-toe round.

    On HARD the AI plays perfectly - it takes the fastest win, delays
    a forced loss as long as possible, and never loses a game it did
    not start from a lost position.
    """

    def __init__(self, player: Mark = Mark.O, rng: Optional[random.Random] = None):
        """
        Initialize the AI player.

        Args:
            player: Which mark the AI places (default: O)
            rng: Random source for EASY/NORMAL tie-breaks. Pass a seeded
                random.Random to get repeatable moves.
        """
        self.player = player
        self.rng = rng or random.Random()
        self.win_checker = WinChecker()

        # Keep track of how many positions the last search visited (for debugging)
        self.moves_evaluated = 0

    @property
    def opponent(self) -> Mark:
        return self.player.opposite()

    def choose_move(self, board: Board, difficulty: Difficulty = Difficulty.NORMAL) -> Optional[int]:
        """
        Choose the AI's next move.

        Args:
            board: Current board. Must not be terminal.
            difficulty: Strategy to use.

        Returns:
            Position (0-8), or None if no move is available.
        """
        if not board.get_empty_cells():
            return None

        if self.win_checker.evaluate(board).is_terminal:
            logger.warning("CPU asked to move on a finished board %s", board)
            return None

        if difficulty == Difficulty.EASY:
            move = self._easy_move(board)
        elif difficulty == Difficulty.HARD:
            move = self._hard_move(board)
        else:
            move = self._normal_move(board)

        logger.debug("CPU (%s, %s) plays %s on %s", self.player.value, difficulty.value, move, board)
        return move

    def _easy_move(self, board: Board) -> Optional[int]:
        """Get a random empty cell."""
        empty_cells = board.get_empty_cells()
        return self.rng.choice(empty_cells) if empty_cells else None

    def _normal_move(self, board: Board) -> Optional[int]:
        """
        Priority heuristic. Each tier short-circuits:
        1. Complete our own line
        2. Block the opponent's line
        3. Center
        4. Random free corner
        5. Random free side
        """
        empty_cells = board.get_empty_cells()

        for position in empty_cells:
            if self.win_checker.check_winner(board.apply_mark(position, self.player)) == self.player:
                return position

        for position in empty_cells:
            if self.win_checker.check_winner(board.apply_mark(position, self.opponent)) == self.opponent:
                return position

        if board[CENTER] is None:
            return CENTER

        corners = [i for i in CORNERS if board[i] is None]
        if corners:
            return self.rng.choice(corners)

        sides = [i for i in SIDES if board[i] is None]
        if sides:
            return self.rng.choice(sides)

        return None

    def _hard_move(self, board: Board) -> Optional[int]:
        """Get the Minimax move; ties go to the lowest position."""
        self.moves_evaluated = 0
        # Within one search a board always sits at the same depth, so
        # the cached scores are exact.
        cache: Dict[Board, int] = {}

        best_score = None
        best_move = None

        for position in board.get_empty_cells():
            score = self._minimax(board.apply_mark(position, self.player), 1, False, cache)
            if best_score is None or score > best_score:
                best_score = score
                best_move = position

        logger.debug(
            "AI evaluated %d positions. Best move: %s (score: %s)",
            self.moves_evaluated, best_move, best_score
        )
        return best_move

    def _score(self, outcome: Outcome, depth: int) -> int:
        """Faster wins and slower losses score better."""
        if outcome.winner == self.player:
            return WIN_SCORE - depth
        if outcome.winner == self.opponent:
            return depth - WIN_SCORE
        return 0

    def _minimax(
        self,
        board: Board,
        depth: int,
        is_maximizing: bool,
        cache: Dict[Board, int]
    ) -> int:
        """
        Minimax over the remaining game tree.

        Args:
            board: Position to evaluate.
            depth: Plies played since the searched position.
            is_maximizing: True if it is the AI's move.
            cache: Scores of boards already searched.

        Returns:
            The score of the position.
        """
        if board in cache:
            return cache[board]

        self.moves_evaluated += 1

        outcome = self.win_checker.evaluate(board)
        if outcome.is_terminal:
            score = self._score(outcome, depth)
            cache[board] = score
            return score

        mark = self.player if is_maximizing else self.opponent
        scores: List[int] = [
            self._minimax(board.apply_mark(position, mark), depth + 1, not is_maximizing, cache)
            for position in board.get_empty_cells()
        ]

        score = max(scores) if is_maximizing else min(scores)
        cache[board] = score
        return score
