"""
Match configuration for the recreation tic-tac-toe game.
Defaults for players, CPU behaviour, and timing.
"""

from logic.game_state import Mark, MatchMode
from logic.ai_player import Difficulty


class MatchConfig:
    """
    Configuration for a tic-tac-toe match.

    Override attributes on an instance (or subclass) to change a setting.
    """

    # ==================== PLAYERS ====================
    # The human always plays X against the CPU
    HUMAN_MARK = Mark.X
    CPU_MARK = Mark.O

    # Display names for local 2-player matches when none are given
    DEFAULT_X_NAME = "Player X"
    DEFAULT_O_NAME = "Player O"

    # Fixed labels in CPU mode
    CPU_MODE_X_LABEL = "You (X)"
    CPU_MODE_O_LABEL = "CPU (O)"

    # ==================== MATCH DEFAULTS ====================
    DEFAULT_MODE = MatchMode.VS_CPU
    DEFAULT_DIFFICULTY = Difficulty.NORMAL
    DEFAULT_START_PLAYER = Mark.X

    # ==================== CPU TIMING ====================
    # Artificial "thinking" pause before the CPU reply is applied
    THINK_DELAY_MS = 280
