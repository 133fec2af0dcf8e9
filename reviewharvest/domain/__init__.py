# Domain Layer
# ============
# Pure business logic with no external dependencies:
# - models: data records passed between pipeline stages
# - resolver: catalog name -> storefront product matching
# - normalizer: ratings, handles, URLs and text clean-up
# - anonymizer: masked reviewer name -> pseudonym
# - aggregator: run-wide dedup of normalized reviews

from .errors import (
    ReviewHarvestError,
    TransientPageError,
    NavigationFailed,
    SelectorTimeout,
    CatalogLoadError,
    ExportWriteFailed,
)
from .models import (
    CatalogEntry,
    SearchCandidate,
    ResolvedProduct,
    CountBased,
    PercentageBased,
    DualHalfIcon,
    RatingEncoding,
    RawReviewRecord,
    NormalizedReview,
    ExportRow,
    EXPORT_COLUMNS,
    OutcomeStatus,
    ProductOutcome,
)
from .resolver import ProductResolver
from .normalizer import FieldNormalizer, normalize_rating, sanitize_handle, resolve_url
from .anonymizer import Anonymizer
from .aggregator import ReviewAggregator
