"""
Reporting module for the recreation games.
Sends finished rounds to the win counter and the game log.
"""

from .errors import CollaboratorFailure
from .win_counter import RecreationStats, WinCounter
from .match_log import HangmanRecord, InMemoryMatchLog, JsonlMatchLog, MatchLog, MatchRecord
from .result_reporter import ResultReporter
