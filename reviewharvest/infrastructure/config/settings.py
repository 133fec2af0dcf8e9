"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses for safety and clarity
- Single source of truth for all configurable values
- CLI flags override values with dataclasses.replace(), never by mutation

EXTENSIBILITY:
- To target another storefront: provide a different SourceSettings/SelectorSettings
- To change per-product limits: set RH_* environment variables or CLI flags
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()

MAX_CONCURRENCY = 3


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class BrowserSettings:
    """Controlled browser settings."""

    headless: bool = field(default_factory=lambda: _env_bool("RH_HEADLESS", True))

    # Per-request timeouts (seconds)
    page_load_timeout: int = 30
    wait_timeout: int = field(default_factory=lambda: _env_int("RH_WAIT_TIMEOUT", 15))

    window_size: str = "1920,1080"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass(frozen=True)
class ScrapeSettings:
    """Per-product and per-run scraping limits."""

    # Reviews taken per product, in page order
    review_limit: int = field(default_factory=lambda: _env_int("RH_REVIEW_LIMIT", 10))

    # Lazy-load loop bounds
    max_pagination_iterations: int = 8
    settle_interval: float = field(default_factory=lambda: _env_float("RH_SETTLE_INTERVAL", 2.0))

    # Attempts per product for navigation/selector failures
    max_attempts: int = field(default_factory=lambda: _env_int("RH_MAX_ATTEMPTS", 2))

    # SAFETY: concurrent browser sessions, kept low for source rate limits
    concurrency: int = field(default_factory=lambda: _env_int("RH_CONCURRENCY", 1))

    # Wall-clock budget for the whole run (seconds)
    run_budget_seconds: float = field(default_factory=lambda: _env_float("RH_RUN_BUDGET", 3600.0))


@dataclass(frozen=True)
class SelectorSettings:
    """
    Every locator the pipeline hands to the page driver.
    Defaults match the Olive Young global storefront.
    """

    # Search results page
    search_result: str = ".prdt-unit"
    candidate_name: str = 'input[name="prdtName"]'
    candidate_id: str = 'input[name="prdtNo"]'
    no_results: str = ".search-result-none"

    # Product detail page
    review_section: str = ".product-review-unit.isChecked"
    no_reviews: str = ".review-none"
    review_record: str = ".product-review-unit.isChecked"
    review_body: str = ".review-cont > p"
    reviewer_name: str = ".name"
    review_date: str = ".date"
    review_image: str = ".review-thumb-list img"

    # Rating encodings, checked in this order
    rating_percentage: str = ".review-star-rating .rating-fill"
    rating_left_icon: str = ".wrap-icon-star .icon-star.left"
    rating_left_filled: str = ".wrap-icon-star .icon-star.left.filled"
    rating_right_icon: str = ".wrap-icon-star .icon-star.right"
    rating_right_filled: str = ".wrap-icon-star .icon-star.right.filled"
    rating_icon: str = ".wrap-icon-star .icon-star"
    rating_icon_filled: str = ".wrap-icon-star .icon-star.filled"
    icons_per_full_star: int = 1

    # Reveal-more control for reviews. None means scroll to the bottom.
    review_load_more: Optional[str] = None
    review_exhausted: Optional[str] = None

    # Category listing pages (catalog harvest)
    listing_item: str = ".prd_info .brand-info"
    listing_brand: str = "dt"
    listing_name: str = "dd"
    listing_load_more: str = ".btn-more"
    listing_exhausted: str = ".btn-more.disabled"


@dataclass(frozen=True)
class SourceSettings:
    """Source storefront location and URL layout."""

    origin: str = field(
        default_factory=lambda: os.getenv("RH_SOURCE_ORIGIN", "https://global.oliveyoung.com").rstrip("/")
    )
    search_path: str = "/display/search?query={query}"
    detail_path: str = "/product/detail?prdtNo={product_id}&dataSource=search_result"
    selectors: SelectorSettings = field(default_factory=SelectorSettings)


@dataclass(frozen=True)
class ExportSettings:
    """Output files and target shop."""

    shop_domain: str = field(
        default_factory=lambda: os.getenv("SHOP_DOMAIN", "").strip().rstrip("/")
    )
    output_file: Path = field(
        default_factory=lambda: Path(os.getenv("RH_OUTPUT_FILE", "JUDGEME_OUTPUT.csv"))
    )

    @property
    def mismatch_file(self) -> Path:
        return self.output_file.with_name(f"{self.output_file.stem}_mismatches.txt")

    @property
    def status_file(self) -> Path:
        return self.output_file.with_name(f"{self.output_file.stem}_status.csv")


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from reviewharvest.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.scrape.review_limit)
    """

    # Sub-settings groups
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    scrape: ScrapeSettings = field(default_factory=ScrapeSettings)
    source: SourceSettings = field(default_factory=SourceSettings)
    export: ExportSettings = field(default_factory=ExportSettings)

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.export.shop_domain:
            issues.append(
                "WARNING: SHOP_DOMAIN not set. "
                "product_url will point at the source storefront."
            )

        if not 1 <= self.scrape.concurrency <= MAX_CONCURRENCY:
            issues.append(
                f"WARNING: concurrency {self.scrape.concurrency} outside 1..{MAX_CONCURRENCY}. "
                "It will be clamped."
            )

        if self.scrape.review_limit < 1:
            issues.append("WARNING: review limit below 1. No reviews will be exported.")

        if self.scrape.max_attempts < 1:
            issues.append("WARNING: max attempts below 1. Each product is tried once.")

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
