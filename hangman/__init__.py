"""
Hangman module for the recreation games.
"""

from .words import WORDS_WITH_HINTS, WordEntry
from .game import HangmanConfig, HangmanGame
