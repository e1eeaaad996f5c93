"""
Shared fixtures for the recreation games tests.
"""

import random
from typing import Callable, List, Tuple

import pytest

from logic.ai_player import AIPlayer
from logic.game_state import Mark
from match_control.config import MatchConfig
from reporting.errors import CollaboratorFailure
from reporting.match_log import InMemoryMatchLog
from reporting.result_reporter import ResultReporter


class ManualScheduler:
    """Queues delayed callbacks until the test runs them."""

    def __init__(self):
        self.pending: List[Tuple[int, Callable[[], None]]] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.pending.append((delay_ms, callback))

    def run_pending(self) -> int:
        ran = 0
        while self.pending:
            _, callback = self.pending.pop(0)
            callback()
            ran += 1
        return ran


class RecordingCounter:
    def __init__(self):
        self.calls: List[str] = []

    def increment_wins(self, game_key: str) -> None:
        self.calls.append(game_key)


class FailingCounter:
    def __init__(self):
        self.attempts = 0

    def increment_wins(self, game_key: str) -> None:
        self.attempts += 1
        raise CollaboratorFailure("win counter offline")


class FailingLog:
    def __init__(self):
        self.attempts = 0

    def log_match(self, record) -> None:
        self.attempts += 1
        raise CollaboratorFailure("match log offline")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def counter():
    return RecordingCounter()


@pytest.fixture
def match_log():
    return InMemoryMatchLog()


@pytest.fixture
def reporter(counter, match_log):
    return ResultReporter(win_counter=counter, match_log=match_log, uid="user-1")


@pytest.fixture
def seeded_engine():
    return AIPlayer(Mark.O, rng=random.Random(1234))


@pytest.fixture
def config():
    cfg = MatchConfig()
    cfg.THINK_DELAY_MS = 0
    return cfg
