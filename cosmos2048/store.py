import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

import pandas as pd

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    address: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Score:
    address: str
    score: float
    run_id: str | None
    commit: str | None
    created_at: datetime


@dataclass
class LeaderboardEntry:
    rank: int
    address: str
    best_score: float
    at: datetime


def _trim(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class MemoryStore:
    """Process-local document store for users and submitted scores."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._scores: list[Score] = []
        self._lock = threading.Lock()

    def upsert_user(self, address: str) -> User:
        address = _trim(address)
        if not address:
            raise ValueError("address is required")
        with self._lock:
            now = _now()
            user = self._users.get(address)
            if user is None:
                user = User(address, now, now)
                self._users[address] = user
                logger.info("created user %s", address)
            else:
                user.updated_at = now
            return user

    def get_user(self, address: str) -> User | None:
        with self._lock:
            return self._users.get(address)

    def add_score(
        self,
        address: str,
        score: float,
        run_id: str | None = None,
        commit: str | None = None,
    ) -> Score:
        if score < 0:
            raise ValueError("score must be non-negative")
        doc = Score(_trim(address), score, _trim(run_id), _trim(commit), _now())
        with self._lock:
            self._scores.append(doc)
        return doc

    def scores_for(self, address: str) -> list[Score]:
        with self._lock:
            return [s for s in self._scores if s.address == address]

    def leaderboard(self, limit: int) -> list[LeaderboardEntry]:
        """
        Best score per address. Ties on a player's best go to the earliest
        submission, and ties between players to whoever got there first.
        """

        with self._lock:
            scores = list(self._scores)
        if not scores or limit <= 0:
            return []

        df = pd.DataFrame(
            {
                "idx": range(len(scores)),
                "address": [s.address for s in scores],
                "score": [s.score for s in scores],
                "created_at": [s.created_at for s in scores],
            }
        )
        order = ["score", "created_at", "idx"]
        best = (
            df.sort_values(order, ascending=[False, True, True])
            .drop_duplicates("address", keep="first")
            .sort_values(order, ascending=[False, True, True])
            .head(limit)
        )

        entries = []
        for rank, idx in enumerate(best["idx"].tolist(), start=1):
            s = scores[idx]
            entries.append(LeaderboardEntry(rank, s.address, s.score, s.created_at))
        return entries
