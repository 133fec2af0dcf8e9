"""
Domain Models - Records Passed Between Pipeline Stages
=======================================================

All records are frozen dataclasses: once a stage produces one, later
stages read it but never change it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


# Fixed export schema. Column order here IS the file's column order.
EXPORT_COLUMNS = (
    "title",
    "body",
    "rating",
    "review_date",
    "reviewer_name",
    "reviewer_email",
    "product_url",
    "picture_urls",
    "product_id",
    "product_handle",
)

PICTURE_URL_SEPARATOR = ", "


@dataclass(frozen=True)
class CatalogEntry:
    """One product name from the catalog, with an optional handle override."""
    display_name: str
    handle: Optional[str] = None


@dataclass(frozen=True)
class SearchCandidate:
    """A product listed on the storefront's search results page."""
    id: str
    display_name: str
    detail_url: str


@dataclass(frozen=True)
class ResolvedProduct:
    """A catalog entry matched to a storefront product."""
    product_id: str
    handle: str
    canonical_url: str
    source_entry: CatalogEntry


# ── Rating encodings ───────────────────────────────────────────
# The storefront renders ratings three different ways. The extractor
# detects which one a review uses; the normalizer turns it into 0..5.

@dataclass(frozen=True)
class CountBased:
    """N filled icons, where `icons_per_full_star` icons make one star."""
    filled_count: int
    icons_per_full_star: int = 1


@dataclass(frozen=True)
class PercentageBased:
    """A fill bar, e.g. style="width: 94%"."""
    pct: float


@dataclass(frozen=True)
class DualHalfIcon:
    """Each star drawn as a left and a right half icon."""
    left_filled: int
    right_filled: int


RatingEncoding = Union[CountBased, PercentageBased, DualHalfIcon]


@dataclass(frozen=True)
class RawReviewRecord:
    """Field bag read from one review node. Any field may be missing."""
    masked_name: Optional[str] = None
    date_text: Optional[str] = None
    body_text: Optional[str] = None
    rating_encoding: Optional[RatingEncoding] = None
    media_refs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizedReview:
    """A review in canonical form, ready for aggregation and export."""
    review_id: str
    product_handle: str
    product_url: str
    body: str
    rating: Optional[float]
    review_date: Optional[str]
    reviewer_name: str
    reviewer_email: Optional[str] = None
    picture_urls: Tuple[str, ...] = ()

    @property
    def dedup_key(self) -> Tuple[str, str]:
        return (self.product_handle, self.body)


@dataclass(frozen=True)
class ExportRow:
    """The ten fixed export columns for one review, all as text."""
    title: str
    body: str
    rating: str
    review_date: str
    reviewer_name: str
    reviewer_email: str
    product_url: str
    picture_urls: str
    product_id: str
    product_handle: str

    @classmethod
    def from_review(cls, review: NormalizedReview) -> "ExportRow":
        return cls(
            title="",
            body=review.body,
            rating=format_rating(review.rating),
            review_date=review.review_date or "",
            reviewer_name=review.reviewer_name or "",
            reviewer_email=review.reviewer_email or "",
            product_url=review.product_url or "",
            picture_urls=PICTURE_URL_SEPARATOR.join(review.picture_urls),
            # Assigned by the import platform
            product_id="",
            product_handle=review.product_handle,
        )

    def as_list(self) -> List[str]:
        return [getattr(self, column) for column in EXPORT_COLUMNS]

    def as_dict(self) -> Dict[str, str]:
        return {column: getattr(self, column) for column in EXPORT_COLUMNS}


def format_rating(rating: Optional[float]) -> str:
    """5.0 -> "5.0", 4.7 -> "4.7", None -> ""."""
    if rating is None:
        return ""
    return f"{rating:.1f}"


class OutcomeStatus(Enum):
    """Processing result for one catalog entry."""
    RESOLVED = "resolved"
    NO_MATCH = "no_match"
    SKIPPED = "skipped"
    EXTRACTION_EMPTY = "extraction_empty"


@dataclass
class ProductOutcome:
    """What happened to one catalog entry during the run."""
    entry: CatalogEntry
    status: OutcomeStatus
    reviews: List[NormalizedReview] = field(default_factory=list)
    product: Optional[ResolvedProduct] = None
    attempts: int = 0
    detail: str = ""

    @property
    def is_mismatch(self) -> bool:
        return self.status == OutcomeStatus.NO_MATCH
