"""
Move validator for the recreation tic-tac-toe game.
Validates that moves follow the rules and tracks turn alternation.
"""

from typing import Optional, List
from dataclasses import dataclass
from .game_state import Board, Mark, Outcome, BOARD_CELLS


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_valid


class MoveValidator:
    """
    Validates tic-tac-toe moves.

    Rules:
    1. The round must not be over
    2. Can only place on empty cells inside the board
    3. Only the side whose turn it is may move
    4. Nobody moves while the CPU is thinking
    """

    def validate_move(
        self,
        board: Board,
        position: int,
        mark: Mark,
        current_turn: Mark,
        game_ended: bool,
        engine_busy: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            position: Cell to mark (0-8).
            mark: The mark the acting side places.
            current_turn: The mark whose turn it is.
            game_ended: True once the round reached a terminal state.
            engine_busy: True while the CPU reply is pending.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if game_ended:
            return ValidationResult(
                is_valid=False,
                error_message="Round is already over!"
            )

        if engine_busy:
            return ValidationResult(
                is_valid=False,
                error_message="CPU is thinking"
            )

        if not isinstance(position, int) or not (0 <= position < BOARD_CELLS):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {position!r}. Must be 0-8."
            )

        if board[position] is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {position} is already occupied by {board[position].value}"
            )

        if mark != current_turn:
            return ValidationResult(
                is_valid=False,
                error_message=f"It is {current_turn.value}'s turn, not {mark.value}'s"
            )

        return ValidationResult(is_valid=True)

    def can_play(
        self,
        board: Board,
        position: int,
        mark: Mark,
        current_turn: Mark,
        game_ended: bool,
        engine_busy: bool = False
    ) -> bool:
        return self.validate_move(
            board, position, mark, current_turn, game_ended, engine_busy
        ).is_valid

    def turn_after(self, mover: Mark, outcome: Outcome) -> Mark:
        """
        Get whose turn it is after a legal move.

        The turn freezes on the mover once the round is over, so the
        display keeps showing the side that finished it.
        """
        if outcome.is_terminal:
            return mover
        return mover.opposite()

    def get_valid_moves(self, board: Board, game_ended: bool = False) -> List[int]:
        """Get all positions the side to move may take."""
        if game_ended:
            return []
        return board.get_empty_cells()
