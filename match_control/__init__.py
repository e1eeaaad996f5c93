"""
Match control module for the recreation tic-tac-toe game.
Runs rounds, keeps the score, and schedules the CPU opponent.
"""

from .config import MatchConfig
from .latch import OneShotLatch
from .scheduler import BlockingScheduler, ImmediateScheduler, Scheduler
from .match_state import MatchPhase, MatchScore, MatchStateMachine, RoundState
