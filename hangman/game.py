"""
Hangman game state for the recreation games.

A game ends when the word is guessed ("won"), after MAX_WRONG wrong
letters ("lost"), or when the countdown runs out ("timeout"). The finished
game is scored and reported exactly once.
"""

import logging
import random
import time
from typing import Callable, Optional, Sequence, Set

from match_control.latch import OneShotLatch
from reporting.match_log import HangmanRecord
from reporting.result_reporter import ResultReporter

from .words import WORDS_WITH_HINTS, WordEntry


logger = logging.getLogger(__name__)


class HangmanConfig:
    """Rules and scoring for hangman."""

    MAX_WRONG = 6
    TIME_LIMIT = 180  # seconds

    # ==================== SCORING ====================
    BASE_SCORE = 100
    PER_SPARE_GUESS = 10     # for every wrong guess left
    TIME_BONUS_DIVISOR = 10  # one point per 10 seconds left
    HINT_PENALTY = 0.7       # multiplier when the hint was shown
    PER_LETTER = 5           # for every letter in the word
    MIN_WIN_SCORE = 10


class HangmanGame:
    """
    One hangman game at a time.

    The countdown is driven from outside: call tick() once per second.
    """

    def __init__(
        self,
        words: Sequence[WordEntry] = WORDS_WITH_HINTS,
        config: Optional[HangmanConfig] = None,
        rng: Optional[random.Random] = None,
        reporter: Optional[ResultReporter] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        if not words:
            raise ValueError("Word list is empty")
        self.words = list(words)
        self.config = config or HangmanConfig()
        self.rng = rng or random.Random()
        self.reporter = reporter
        self.clock = clock

        self.session_id = str(int(time.time() * 1000))
        self._finished = OneShotLatch()
        self.new_game()

    def new_game(self) -> None:
        """Pick a random word and reset everything but the session."""
        self.word_data = self.rng.choice(self.words)
        self.guessed: Set[str] = set()
        self.wrong_guesses = 0
        self.hint_shown = False
        self.time_left = self.config.TIME_LIMIT
        self.result: Optional[str] = None
        self.started_at = self.clock()
        self._finished.reset()

    @property
    def word(self) -> str:
        return self.word_data.word

    @property
    def game_over(self) -> bool:
        return self.result is not None

    @property
    def won(self) -> bool:
        return self.result == "won"

    @property
    def masked_word(self) -> str:
        return " ".join(c if c in self.guessed else "_" for c in self.word)

    @property
    def difficulty(self) -> str:
        length = len(self.word)
        if length <= 5:
            return "easy"
        if length <= 8:
            return "medium"
        return "hard"

    def guess(self, letter: str) -> bool:
        """
        Guess a letter.

        Returns:
            True if the guess was counted, False if it was ignored
            (game over, repeated letter, or not a single letter).
        """
        letter = letter.strip().upper()
        if len(letter) != 1 or not letter.isalpha():
            return False
        if self.game_over or letter in self.guessed:
            return False

        self.guessed.add(letter)

        if letter not in self.word:
            self.wrong_guesses += 1
            if self.wrong_guesses >= self.config.MAX_WRONG:
                self._finish("lost")
        elif set(self.word) <= self.guessed:
            self._finish("won")

        return True

    def tick(self, seconds: int = 1) -> None:
        """Advance the countdown; running out of time ends the game."""
        if self.game_over:
            return
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            self._finish("timeout")

    def show_hint(self) -> str:
        if not self.game_over:
            self.hint_shown = True
        return self.word_data.hint

    def calculate_score(self, result: str) -> int:
        if result != "won":
            return 0

        c = self.config
        score = c.BASE_SCORE
        score += (c.MAX_WRONG - self.wrong_guesses) * c.PER_SPARE_GUESS
        score += self.time_left // c.TIME_BONUS_DIVISOR
        if self.hint_shown:
            score = int(score * c.HINT_PENALTY)
        score += len(self.word) * c.PER_LETTER

        return max(score, c.MIN_WIN_SCORE)

    def _finish(self, result: str) -> None:
        if not self._finished.try_acquire():
            return

        self.result = result
        logger.debug("Hangman %s: %s", result, self.word)

        if self.reporter is None:
            return

        self.reporter.report_hangman_result(HangmanRecord(
            word=self.word,
            category=self.word_data.category,
            hint=self.word_data.hint,
            result=result,
            hint_used=self.hint_shown,
            wrong_guesses=self.wrong_guesses,
            total_guesses=len(self.guessed),
            time_elapsed=round(self.clock() - self.started_at),
            time_remaining=self.time_left,
            score=self.calculate_score(result),
            difficulty=self.difficulty,
            session_id=self.session_id,
        ))
