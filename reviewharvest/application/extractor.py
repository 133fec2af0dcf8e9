"""
Review Extractor - Review Node to Raw Field Bag
================================================

Reads one review node into a RawReviewRecord. Missing fields come back
as None/empty and never raise. At most `limit` records are read per
product, in page order, without re-sorting.
"""

import logging
import re
from typing import List, Optional, Sequence

from ..domain import CountBased, DualHalfIcon, PercentageBased, RawReviewRecord
from ..infrastructure.browser import PageNode
from ..infrastructure.config import SelectorSettings

logger = logging.getLogger(__name__)

DEFAULT_REVIEW_LIMIT = 10

_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s*%")

# Attributes that may hold an image reference, lazy-load ones first
IMAGE_ATTRIBUTES = ("data-src", "data-original", "src")


class ReviewExtractor:
    """
    Usage:
        extractor = ReviewExtractor(settings.source.selectors, limit=10)
        records = extractor.extract(driver.query(selectors.review_record))
    """

    def __init__(self, selectors: SelectorSettings, limit: int = DEFAULT_REVIEW_LIMIT):
        self._sel = selectors
        self.limit = max(0, limit)

    def extract(self, nodes: Sequence[PageNode]) -> List[RawReviewRecord]:
        records = [self.extract_record(node) for node in list(nodes)[:self.limit]]
        logger.debug(f"Extracted {len(records)} of {len(nodes)} review nodes")
        return records

    def extract_record(self, node: PageNode) -> RawReviewRecord:
        return RawReviewRecord(
            masked_name=self._text(node, self._sel.reviewer_name),
            date_text=self._text(node, self._sel.review_date),
            body_text=self._text(node, self._sel.review_body),
            rating_encoding=self.detect_rating(node),
            media_refs=self._media_refs(node),
        )

    def detect_rating(self, node: PageNode):
        """
        Identify which rating encoding the node uses.

        Checked in order: percentage fill bar, left/right half icons,
        plain icon count. None when no rating markup is present.
        """
        sel = self._sel

        fill = node.first(sel.rating_percentage)
        if fill is not None:
            pct = self._percentage(fill)
            if pct is not None:
                return PercentageBased(pct=pct)

        if node.query(sel.rating_left_icon) or node.query(sel.rating_right_icon):
            return DualHalfIcon(
                left_filled=len(node.query(sel.rating_left_filled)),
                right_filled=len(node.query(sel.rating_right_filled)),
            )

        if node.query(sel.rating_icon):
            return CountBased(
                filled_count=len(node.query(sel.rating_icon_filled)),
                icons_per_full_star=sel.icons_per_full_star,
            )

        return None

    @staticmethod
    def _percentage(fill: PageNode) -> Optional[float]:
        for value in (fill.attribute("style"), fill.attribute("data-rating"), fill.text()):
            if not value:
                continue
            match = _PERCENT.search(value)
            if match:
                return float(match.group(1))
        return None

    @staticmethod
    def _text(node: PageNode, locator: str) -> Optional[str]:
        child = node.first(locator)
        if child is None:
            return None
        text = child.text()
        return text.strip() if text is not None else None

    def _media_refs(self, node: PageNode) -> tuple:
        refs = []
        for image in node.query(self._sel.review_image):
            for attr in IMAGE_ATTRIBUTES:
                value = image.attribute(attr)
                if value and value.strip():
                    refs.append(value.strip())
                    break
        return tuple(refs)
