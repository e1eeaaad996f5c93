"""
Win checker for the recreation tic-tac-toe game.
Checks if a mark has won or if the round is a draw.
"""

from typing import Optional, Tuple
from .game_state import Board, Mark, Outcome


Line = Tuple[int, int, int]


class WinChecker:
    """
    Checks for win conditions in tic-tac-toe.

    Win condition: 3 identical marks in a row
    (horizontally, vertically, or diagonally)
    """

    # All possible winning lines, scanned in this order
    WINNING_LINES = (
        # Rows
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    )

    def get_winning_line(self, board: Board) -> Optional[Line]:
        """
        Get the first winning line on the board.

        Args:
            board: The board to scan.

        Returns:
            The line as a tuple of positions, or None.
        """
        for line in self.WINNING_LINES:
            a, b, c = line
            if board[a] is not None and board[a] == board[b] == board[c]:
                return line
        return None

    def check_winner(self, board: Board) -> Optional[Mark]:
        """Get the winning mark, or None if no line is complete."""
        line = self.get_winning_line(board)
        if line is None:
            return None
        return board[line[0]]

    def check_draw(self, board: Board) -> bool:
        """A draw is a full board with no complete line."""
        return board.is_full and self.check_winner(board) is None

    def evaluate(self, board: Board) -> Outcome:
        """
        Evaluate the board.

        A board with two complete lines for different marks cannot be
        reached in legal play; the first line in scan order decides it.
        """
        winner = self.check_winner(board)
        if winner is not None:
            return Outcome.win_for(winner)
        if board.is_full:
            return Outcome.DRAW
        return Outcome.IN_PROGRESS


_checker = WinChecker()


def evaluate(board: Board) -> Outcome:
    return _checker.evaluate(board)


def get_winning_line(board: Board) -> Optional[Line]:
    return _checker.get_winning_line(board)
