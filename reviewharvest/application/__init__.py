# Application Layer
# =================
# Orchestrates the domain against a PageDriver:
# - pagination: bounded reveal-more state machine
# - extractor: review node -> raw field bag
# - search: storefront search -> candidates
# - pipeline: per-product retries, concurrency, run budget, export
# - catalog_harvest: category listings -> product catalog

from .pagination import PaginationController, PaginationResult, PaginationState, ExhaustedReason
from .extractor import ReviewExtractor
from .search import CandidateSearch
from .pipeline import ReviewPipeline, RunReport, DriverPool
from .catalog_harvest import CatalogHarvester
