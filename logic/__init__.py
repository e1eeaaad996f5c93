"""
Logic module for the recreation tic-tac-toe game.
Handles the board, rules, and CPU opponent.
"""

from .game_state import Board, Mark, Outcome, MatchMode, PlayerNames, IllegalMove
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker, evaluate, get_winning_line
from .ai_player import AIPlayer, Difficulty
