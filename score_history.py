"""Session score history for Yahtzee.

Keeps finished-game results in memory, most recent first, for the
lifetime of the process. Nothing is written to disk.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class HistoryEntry:
    """A finished game: when it ended and its final total."""
    timestamp: datetime
    score: int


class ScoreHistory:
    """Append-ordered list of HistoryEntry records, newest first."""

    def __init__(self):
        self._entries = []

    def record(self, score, timestamp=None):
        """Record a finished game at the front of the history.

        Returns the new HistoryEntry.
        """
        if timestamp is None:
            timestamp = datetime.now()
        entry = HistoryEntry(timestamp=timestamp, score=score)
        self._entries.insert(0, entry)
        return entry

    @property
    def entries(self):
        """All entries, most recent first."""
        return tuple(self._entries)

    def get_high_scores(self, limit=10):
        """Return top entries sorted by score descending.

        Ties keep their most-recent-first order.
        """
        ranked = sorted(self._entries, key=lambda e: e.score, reverse=True)
        return ranked[:limit]

    def best(self):
        """Highest-scoring entry, or None if no game has finished."""
        top = self.get_high_scores(limit=1)
        return top[0] if top else None

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
