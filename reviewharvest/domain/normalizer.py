"""
Field Normalizer - Raw Review Fields to Canonical Values
=========================================================

RATINGS:
The storefront draws the same star rating in (at least) three ways.
Each is read into its own RatingEncoding variant and converted here:

    CountBased(filled, icons_per_full_star) -> filled / icons_per_full_star
    PercentageBased(pct)                    -> round(pct / 100 * 5, 1)
    DualHalfIcon(left, right)               -> (left + right) * 0.5

Anything unrecognised or out of range becomes None (unknown), never 0
and never a full five stars.

URLS:
Picture references are made absolute against the storefront origin.
Empty references and inline placeholders are dropped.

TEXT:
Text is trimmed. Missing text stays None so "unknown" and "blank" remain
distinguishable.
"""

import logging
import math
import re
import uuid
from typing import Optional, Tuple
from urllib.parse import urljoin

from .models import (
    CountBased,
    DualHalfIcon,
    NormalizedReview,
    PercentageBased,
    RawReviewRecord,
    ResolvedProduct,
)

logger = logging.getLogger(__name__)

MAX_RATING = 5.0

_NON_HANDLE_CHARS = re.compile(r"[\W_]+", re.UNICODE)

# Namespace for review ids, so re-runs produce the same ids
REVIEW_ID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "reviewharvest/review")


def _half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _ambiguous(encoding, reason: str) -> None:
    logger.warning(f"EncodingAmbiguous: {encoding!r} ({reason}), rating left empty")
    return None


def normalize_rating(encoding) -> Optional[float]:
    """
    Convert a detected rating encoding to a 0..5 value.

    Count and half-icon encodings land on 0.5 steps. Percentages keep one
    decimal (94% -> 4.7).
    """
    if encoding is None:
        return None

    if isinstance(encoding, PercentageBased):
        pct = encoding.pct
        if pct is None or pct < 0 or pct > 100:
            return _ambiguous(encoding, "percentage out of range")
        # pct / 100 * 5 * 10 == pct / 2, kept exact for the rounding step
        return _half_up(pct / 2) / 10

    if isinstance(encoding, CountBased):
        if encoding.icons_per_full_star is None or encoding.icons_per_full_star < 1:
            return _ambiguous(encoding, "invalid icons per star")
        if encoding.filled_count is None or encoding.filled_count < 0:
            return _ambiguous(encoding, "negative icon count")
        rating = _half_up(encoding.filled_count * 2 / encoding.icons_per_full_star) / 2
        if rating > MAX_RATING:
            return _ambiguous(encoding, "more stars than the scale allows")
        return rating

    if isinstance(encoding, DualHalfIcon):
        if encoding.left_filled < 0 or encoding.right_filled < 0:
            return _ambiguous(encoding, "negative icon count")
        rating = (encoding.left_filled + encoding.right_filled) * 0.5
        if rating > MAX_RATING:
            return _ambiguous(encoding, "more stars than the scale allows")
        return rating

    return _ambiguous(encoding, "unknown encoding")


def sanitize_handle(value: Optional[str]) -> str:
    """
    Turn a product name into a shop handle.

    "Green Finger Forest Multi Defense Sun Stick 19g"
        -> "green-finger-forest-multi-defense-sun-stick-19g"

    Lower-case, single hyphens, no leading/trailing hyphen. Applying it
    twice gives the same result as applying it once.
    """
    if not value:
        return ""
    return _NON_HANDLE_CHARS.sub("-", value.lower()).strip("-")


def resolve_url(ref: Optional[str], origin: str) -> Optional[str]:
    """Make a picture reference absolute. Returns None for unusable refs."""
    if not ref:
        return None
    ref = ref.strip()
    if not ref or ref.startswith("data:"):
        return None
    if ref.startswith("//"):
        return f"https:{ref}"
    if re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", ref):
        return ref
    return urljoin(origin.rstrip("/") + "/", ref)


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim text. None stays None."""
    if value is None:
        return None
    return value.strip()


def product_url_for(product: ResolvedProduct, shop_domain: Optional[str] = None) -> str:
    """Target shop URL when a shop domain is known, else the source page."""
    if shop_domain:
        return f"{shop_domain.rstrip('/')}/products/{product.handle}"
    return product.canonical_url


class FieldNormalizer:
    """
    Builds NormalizedReview records from raw field bags.

    Usage:
        normalizer = FieldNormalizer(origin, anonymizer, shop_domain="https://shop.example")
        review = normalizer.normalize(raw, product)   # None when body is empty
    """

    def __init__(self, origin: str, anonymizer, shop_domain: Optional[str] = None):
        self._origin = origin
        self._anonymizer = anonymizer
        self._shop_domain = shop_domain

    def normalize(
        self,
        raw: RawReviewRecord,
        product: ResolvedProduct,
    ) -> Optional[NormalizedReview]:
        body = clean_text(raw.body_text)
        if not body:
            logger.debug(f"Dropping review without body for {product.handle}")
            return None

        return NormalizedReview(
            review_id=self._review_id(product, body),
            product_handle=product.handle,
            product_url=product_url_for(product, self._shop_domain),
            body=body,
            rating=normalize_rating(raw.rating_encoding),
            review_date=clean_text(raw.date_text),
            reviewer_name=self._anonymizer.anonymize(raw.masked_name),
            reviewer_email=None,
            picture_urls=self._picture_urls(raw.media_refs),
        )

    def _picture_urls(self, refs) -> Tuple[str, ...]:
        urls = (resolve_url(ref, self._origin) for ref in refs or ())
        return tuple(url for url in urls if url)

    @staticmethod
    def _review_id(product: ResolvedProduct, body: str) -> str:
        return str(uuid.uuid5(REVIEW_ID_NAMESPACE, f"{product.handle}\n{body}"))
