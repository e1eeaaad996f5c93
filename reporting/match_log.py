"""
Game logs for finished rounds.
Stores one record per finished 2-player tic-tac-toe round or hangman game.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from .errors import CollaboratorFailure


logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class MatchRecord:
    """A finished local 2-player tic-tac-toe round."""
    x_name: str
    o_name: str
    winner: str              # "X", "O" or "draw"
    mode: str = "local-2p"
    uid: Optional[str] = None
    finished_at: str = field(default_factory=_now)

    collection = "tictactoeMatches"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HangmanRecord:
    """A finished hangman game."""
    word: str
    category: str
    hint: str
    result: str              # "won", "lost" or "timeout"
    hint_used: bool
    wrong_guesses: int
    total_guesses: int
    time_elapsed: int
    time_remaining: int
    score: int
    difficulty: str
    session_id: str = ""
    uid: Optional[str] = None
    finished_at: str = field(default_factory=_now)

    collection = "hangmanGames"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


GameRecord = Union[MatchRecord, HangmanRecord]


class MatchLog(Protocol):
    """The game log the result reporter talks to."""

    def log_match(self, record: GameRecord) -> None:
        ...


class InMemoryMatchLog:
    """Keeps records in a list, grouped by collection name."""

    def __init__(self):
        self.records: List[GameRecord] = []

    def log_match(self, record: GameRecord) -> None:
        self.records.append(record)
        logger.debug("Logged %s record: %s", record.collection, record)

    def by_collection(self, collection: str) -> List[GameRecord]:
        return [r for r in self.records if r.collection == collection]


class JsonlMatchLog:
    """
    Appends records to a JSON Lines file.

    Each line is one object with a "collection" key plus the record fields.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def log_match(self, record: GameRecord) -> None:
        row = {"collection": record.collection}
        row.update(record.to_dict())

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(row, sort_keys=True) + "\n")
        except OSError as e:
            raise CollaboratorFailure(f"Could not write {self.path}: {e}") from e

    def read_all(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
