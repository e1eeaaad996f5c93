"""
Result reporting for finished rounds.

Forwards round results to the win counter and the game log. Both calls
are best effort: a failing collaborator is logged and never changes the
outcome or score the player already sees.
"""

import logging
from typing import Optional

from logic.game_state import MatchMode, Outcome, PlayerNames
from logic.ai_player import Difficulty

from .match_log import HangmanRecord, MatchLog, MatchRecord
from .win_counter import WinCounter


logger = logging.getLogger(__name__)


class ResultReporter:
    """Notifies the outside world about finished rounds."""

    TIC_TAC_TOE_KEY = "ticTacToe"
    HANGMAN_KEY = "hangman"

    def __init__(
        self,
        win_counter: Optional[WinCounter] = None,
        match_log: Optional[MatchLog] = None,
        uid: Optional[str] = None
    ):
        """
        Args:
            win_counter: Receives increment_wins(game_key) calls.
            match_log: Receives log_match(record) calls.
            uid: User id stamped on logged records.
        """
        self.win_counter = win_counter
        self.match_log = match_log
        self.uid = uid

    def report_round_result(
        self,
        outcome: Outcome,
        mode: MatchMode,
        difficulty: Difficulty,
        player_names: PlayerNames
    ) -> None:
        """
        Report a finished tic-tac-toe round.

        Any win (X or O) counts toward the tic-tac-toe win total. Only local
        2-player rounds are written to the game log.
        """
        if not outcome.is_terminal:
            raise ValueError(f"Cannot report an unfinished round ({outcome.value})")

        logger.info(
            "Round finished: %s (mode=%s, difficulty=%s)",
            outcome.value, mode.value, difficulty.value
        )

        if outcome != Outcome.DRAW:
            self._increment_wins(self.TIC_TAC_TOE_KEY)

        if mode == MatchMode.LOCAL_2P:
            winner = outcome.winner.value if outcome.winner else "draw"
            self._log(MatchRecord(
                x_name=player_names.x_name,
                o_name=player_names.o_name,
                winner=winner,
                mode=mode.value,
                uid=self.uid,
            ))

    def report_hangman_result(self, record: HangmanRecord) -> None:
        """Log a finished hangman game, then count it if it was won."""
        logger.info("Hangman finished: %s (score=%d)", record.result, record.score)

        if record.uid is None:
            record.uid = self.uid
        self._log(record)

        if record.result == "won":
            self._increment_wins(self.HANGMAN_KEY)

    def _increment_wins(self, game_key: str) -> None:
        if self.win_counter is None:
            return
        try:
            self.win_counter.increment_wins(game_key)
        except Exception:
            logger.exception("increment_wins(%s) failed", game_key)

    def _log(self, record) -> None:
        if self.match_log is None:
            return
        try:
            self.match_log.log_match(record)
        except Exception:
            logger.exception("Failed to log %s record", record.collection)
