"""
Schedulers for the CPU "thinking" delay.

The match state machine hands the pending CPU move to a scheduler with
call_later(delay_ms, callback). Which scheduler is used decides how the
delay is spent; the callback always runs on the caller's thread.
"""

import time
from typing import Callable, Protocol


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        ...


class ImmediateScheduler:
    """Runs the callback right away, skipping the delay."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        callback()


class BlockingScheduler:
    """Sleeps for the delay, then runs the callback (console play)."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self.sleep = sleep

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        if delay_ms > 0:
            self.sleep(delay_ms / 1000)
        callback()
