"""Service collecting user feedback on verdicts for human review."""

import logging
import threading
from collections import deque
from typing import Deque, List, Optional

from ..models.feedback import FeedbackEntry, FeedbackRating

logger = logging.getLogger(__name__)


class FeedbackService:
    """Keeps submitted feedback in a bounded in-memory review queue."""

    def __init__(self, max_entries: int = 1000):
        self._queue: Deque[FeedbackEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def submit(
        self,
        rating: FeedbackRating,
        comment: Optional[str] = None,
        identity: Optional[str] = None,
    ) -> FeedbackEntry:
        """Queue a rating for review.

        Args:
            rating: Whether the user found the verdict accurate
            comment: Optional free-text explanation
            identity: Session that submitted it

        Returns:
            The stored feedback entry
        """
        comment = comment.strip() if comment else None
        entry = FeedbackEntry(rating=rating, comment=comment or None, identity=identity)
        with self._lock:
            self._queue.append(entry)
        logger.info(f"📝 Feedback queued: {entry.rating.value} ({len(self._queue)} pending)")
        return entry

    def pending(self) -> List[FeedbackEntry]:
        """Get queued feedback, oldest first."""
        with self._lock:
            return list(self._queue)

    def disputed(self) -> List[FeedbackEntry]:
        """Get feedback that marked a verdict as inaccurate."""
        return [entry for entry in self.pending() if entry.rating is FeedbackRating.INACCURATE]
