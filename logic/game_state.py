"""
Board model for the recreation tic-tac-toe game.
Tracks the marks on the 3x3 grid and the round outcome.

Positions are numbered row by row:

    0 | 1 | 2
    3 | 4 | 5
    6 | 7 | 8
"""

from enum import Enum
from typing import Optional, List, NamedTuple, Tuple
from dataclasses import dataclass, field


class Mark(Enum):
    """The two marks a player can place."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the opposite mark."""
        return Mark.O if self == Mark.X else Mark.X


class Outcome(Enum):
    """Result of a round, derived from the board."""
    IN_PROGRESS = "in_progress"
    X_WINS = "x_wins"
    O_WINS = "o_wins"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self != Outcome.IN_PROGRESS

    @property
    def winner(self) -> Optional[Mark]:
        """The winning mark, or None for a draw or an unfinished round."""
        if self == Outcome.X_WINS:
            return Mark.X
        if self == Outcome.O_WINS:
            return Mark.O
        return None

    @classmethod
    def win_for(cls, mark: Mark) -> "Outcome":
        return cls.X_WINS if mark == Mark.X else cls.O_WINS


class MatchMode(Enum):
    """Who plays the O side."""
    VS_CPU = "cpu"
    LOCAL_2P = "local-2p"


class PlayerNames(NamedTuple):
    x_name: str
    o_name: str


class IllegalMove(ValueError):
    """Raised when a mark is placed out of range or on an occupied cell."""


BOARD_CELLS = 9

Cells = Tuple[Optional[Mark], ...]


@dataclass(frozen=True)
class Board:
    """
    An immutable 3x3 board.

    Every mutation returns a new Board, so snapshots kept in the move
    history never change underneath the caller.
    """

    cells: Cells = field(default_factory=lambda: (None,) * BOARD_CELLS)

    def __post_init__(self):
        if len(self.cells) != BOARD_CELLS:
            raise ValueError(f"Board needs {BOARD_CELLS} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """
        Build a board from a 9 character string.

        'X' and 'O' are marks, '.', '-', '_' and ' ' are empty cells.
        Example: "XX.OO...." (X on 0 and 1, O on 3 and 4).
        """
        if len(text) != BOARD_CELLS:
            raise ValueError(f"Board string must be {BOARD_CELLS} characters: {text!r}")

        cells: List[Optional[Mark]] = []
        for char in text.upper():
            if char in ".-_ ":
                cells.append(None)
            elif char in ("X", "O"):
                cells.append(Mark(char))
            else:
                raise ValueError(f"Unknown board character {char!r}")
        return cls(tuple(cells))

    def __getitem__(self, position: int) -> Optional[Mark]:
        return self.cells[position]

    def apply_mark(self, position: int, mark: Mark) -> "Board":
        """
        Place a mark and return the resulting board.

        Args:
            position: Cell index (0-8).
            mark: Mark to place.

        Returns:
            A new Board with exactly one extra mark.

        Raises:
            IllegalMove: If the position is out of range or already taken.
        """
        if not isinstance(position, int) or not (0 <= position < BOARD_CELLS):
            raise IllegalMove(f"Invalid position {position!r}. Must be 0-8.")
        if self.cells[position] is not None:
            raise IllegalMove(
                f"Cell {position} is already occupied by {self.cells[position].value}"
            )

        cells = list(self.cells)
        cells[position] = mark
        return Board(tuple(cells))

    def get_empty_cells(self) -> List[int]:
        """Get all empty positions in ascending order."""
        return [i for i, cell in enumerate(self.cells) if cell is None]

    def count(self, mark: Mark) -> int:
        return sum(1 for cell in self.cells if cell == mark)

    @property
    def is_empty(self) -> bool:
        return all(cell is None for cell in self.cells)

    @property
    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def next_turn(self, start_player: Mark = Mark.X) -> Mark:
        """
        Infer whose turn it is from the mark counts.

        The side that started has placed as many marks as the other side
        when it is its turn again.
        """
        other = start_player.opposite()
        if self.count(start_player) == self.count(other):
            return start_player
        return other

    def render(self) -> str:
        """Draw the board for the console, numbering the empty cells."""
        rows = []
        for row in range(3):
            symbols = []
            for col in range(3):
                position = row * 3 + col
                cell = self.cells[position]
                symbols.append(cell.value if cell is not None else str(position))
            rows.append(" " + " | ".join(symbols))
        return "\n---+---+---\n".join(rows)

    def __str__(self) -> str:
        return "".join(cell.value if cell is not None else "." for cell in self.cells)
