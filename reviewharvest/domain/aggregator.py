"""
Review Aggregator - Run-Wide Collection With Dedup
===================================================

Keeps every normalized review of the run in insertion order.
Dedup key is (product_handle, body); the first review seen wins and
later duplicates are dropped, not merged.
"""

import logging
import threading
from typing import Iterable, List, Set, Tuple

from .models import NormalizedReview

logger = logging.getLogger(__name__)


class ReviewAggregator:
    """
    Usage:
        aggregator = ReviewAggregator()
        aggregator.extend(outcome.reviews)
        rows = aggregator.reviews
    """

    def __init__(self):
        self._reviews: List[NormalizedReview] = []
        self._seen: Set[Tuple[str, str]] = set()
        self._duplicates = 0
        self._lock = threading.Lock()

    def add(self, review: NormalizedReview) -> bool:
        """Add a review. Returns False if it was a duplicate."""
        with self._lock:
            key = review.dedup_key
            if key in self._seen:
                self._duplicates += 1
                logger.debug(f"Duplicate review dropped for {review.product_handle}")
                return False
            self._seen.add(key)
            self._reviews.append(review)
            return True

    def extend(self, reviews: Iterable[NormalizedReview]) -> int:
        """Add many reviews. Returns how many were kept."""
        return sum(1 for review in reviews if self.add(review))

    @property
    def reviews(self) -> List[NormalizedReview]:
        with self._lock:
            return list(self._reviews)

    @property
    def duplicates(self) -> int:
        return self._duplicates

    def __len__(self) -> int:
        return len(self._reviews)
