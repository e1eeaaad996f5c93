"""
Per-user win counter for the recreation games.
Keeps a wins total for each (user, game) pair and notifies listeners.
"""

import logging
from typing import Callable, Dict, List, Optional, Protocol, Tuple


logger = logging.getLogger(__name__)

WinsListener = Callable[[int], None]


class WinCounter(Protocol):
    """The win counter the result reporter talks to."""

    def increment_wins(self, game_key: str) -> None:
        ...


class RecreationStats:
    """
    In-memory win counter.

    Counts are kept per signed-in user and per game key (e.g.
    "ticTacToe", "hangman"). While nobody is signed in, reads return 0
    and increments are ignored.
    """

    def __init__(self, uid: Optional[str] = None):
        """
        Initialize the counter.

        Args:
            uid: User to sign in right away (default: nobody)
        """
        self.uid = uid
        self._wins: Dict[Tuple[str, str], int] = {}
        self._listeners: Dict[Tuple[str, str], List[WinsListener]] = {}

    @property
    def ready(self) -> bool:
        return self.uid is not None

    def sign_in(self, uid: str) -> None:
        if not uid:
            raise ValueError("uid must not be empty")
        self.uid = uid
        logger.debug("Signed in as %s", uid)

    def sign_out(self) -> None:
        self.uid = None

    def get_wins(self, game_key: str) -> int:
        if self.uid is None:
            return 0
        return self._wins.get((self.uid, game_key), 0)

    def increment_wins(self, game_key: str) -> None:
        """Add one win for the signed-in user and notify listeners."""
        if self.uid is None:
            logger.debug("Not signed in, %s win not counted", game_key)
            return

        key = (self.uid, game_key)
        self._wins[key] = self._wins.get(key, 0) + 1
        logger.info("%s wins for %s: %d", game_key, self.uid, self._wins[key])
        self._notify(key)

    def listen_wins(self, game_key: str, callback: WinsListener) -> Callable[[], None]:
        """
        Call `callback` with the current total now and after every increment.

        Returns:
            A function that removes the listener.
        """
        if self.uid is None:
            return lambda: None

        key = (self.uid, game_key)
        self._listeners.setdefault(key, []).append(callback)
        self._call_listener(callback, self._wins.get(key, 0))

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def _notify(self, key: Tuple[str, str]) -> None:
        wins = self._wins.get(key, 0)
        for callback in list(self._listeners.get(key, [])):
            self._call_listener(callback, wins)

    def _call_listener(self, callback: WinsListener, wins: int) -> None:
        try:
            callback(wins)
        except Exception:
            logger.exception("listen_wins callback failed")
