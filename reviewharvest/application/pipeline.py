"""
Review Pipeline - Catalog Entries to Exported Reviews
======================================================

Per catalog entry:

    search -> resolve -> paginate -> extract -> normalize/anonymize

Every entry ends in exactly one ProductOutcome (Resolved, NoMatch,
Skipped, ExtractionEmpty). Page failures are retried up to
`max_attempts`; once exhausted the entry is Skipped and the run moves
on. Entries still waiting when the run budget runs out are Skipped too.

Entries run on a small thread pool (1-3 browsers). Results are merged
into the aggregator in catalog order, so the output does not depend on
which browser finished first.
"""

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..domain import (
    Anonymizer,
    CatalogEntry,
    FieldNormalizer,
    NavigationFailed,
    NormalizedReview,
    OutcomeStatus,
    ProductOutcome,
    ProductResolver,
    ResolvedProduct,
    ReviewAggregator,
    SelectorTimeout,
    TransientPageError,
)
from ..infrastructure.browser import NavigationStatus, PageDriver, WaitStatus
from ..infrastructure.config import MAX_CONCURRENCY, Settings
from ..infrastructure.export import CsvExporter
from .extractor import ReviewExtractor
from .pagination import PaginationController
from .search import CandidateSearch

logger = logging.getLogger(__name__)

BUDGET_EXCEEDED = "budget exceeded"
ERROR_PREFIX = "error: "


@dataclass
class RunReport:
    """Everything a run produced, in catalog order."""
    outcomes: List[ProductOutcome] = field(default_factory=list)
    aggregator: ReviewAggregator = field(default_factory=ReviewAggregator)

    @property
    def reviews(self) -> List[NormalizedReview]:
        return self.aggregator.reviews

    @property
    def mismatches(self) -> List[str]:
        return [o.entry.display_name for o in self.outcomes if o.is_mismatch]

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> Dict[str, int]:
        stats = {status.value: self.count(status) for status in OutcomeStatus}
        stats["total"] = len(self.outcomes)
        stats["reviews"] = len(self.aggregator)
        return stats


class DriverPool:
    """Reuses one browser per worker thread instead of one per product."""

    def __init__(self, factory: Callable[[], PageDriver]):
        self._factory = factory
        self._idle: "queue.Queue[PageDriver]" = queue.Queue()
        self._all: List[PageDriver] = []
        self._lock = threading.Lock()

    def acquire(self) -> PageDriver:
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            driver = self._factory()
            with self._lock:
                self._all.append(driver)
            return driver

    def release(self, driver: PageDriver) -> None:
        with self._lock:
            pooled = driver in self._all
        if not pooled:
            # Pool already closed
            self._close(driver)
            return
        self._idle.put(driver)

    def discard(self, driver: PageDriver) -> None:
        with self._lock:
            if driver in self._all:
                self._all.remove(driver)
        self._close(driver)

    def close_all(self) -> None:
        with self._lock:
            drivers, self._all = self._all, []
        for driver in drivers:
            self._close(driver)

    @staticmethod
    def _close(driver: PageDriver) -> None:
        try:
            driver.close()
        except Exception as e:
            logger.debug(f"Error closing driver: {e}")


class ReviewPipeline:
    """
    Usage:
        pipeline = ReviewPipeline(settings, driver_factory=SeleniumPageDriver)
        report = pipeline.run(entries)
        pipeline.export(report)
    """

    def __init__(
        self,
        settings: Settings,
        driver_factory: Callable[[], PageDriver],
        anonymizer: Optional[Anonymizer] = None,
        exporter: Optional[CsvExporter] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._settings = settings
        self._driver_factory = driver_factory
        self._clock = clock
        self._sleep = sleep
        self._sel = settings.source.selectors
        self._wait_timeout = settings.browser.wait_timeout

        scrape = settings.scrape
        self.search = CandidateSearch(settings.source, wait_timeout=self._wait_timeout)
        self.resolver = ProductResolver()
        self.paginator = PaginationController(
            max_iterations=scrape.max_pagination_iterations,
            settle_interval=scrape.settle_interval,
            sleep=sleep,
        )
        self.extractor = ReviewExtractor(self._sel, limit=scrape.review_limit)
        self.normalizer = FieldNormalizer(
            origin=settings.source.origin,
            anonymizer=anonymizer or Anonymizer(),
            shop_domain=settings.export.shop_domain or None,
        )
        self.exporter = exporter or CsvExporter()

    @property
    def concurrency(self) -> int:
        return min(max(1, self._settings.scrape.concurrency), MAX_CONCURRENCY)

    # ── Run level ──────────────────────────────────────────────

    def run(self, entries: Sequence[CatalogEntry]) -> RunReport:
        """Process every catalog entry. Never raises for per-product failures."""
        report = RunReport()
        if not entries:
            logger.warning("Catalog is empty, nothing to do")
            return report

        deadline = self._clock() + self._settings.scrape.run_budget_seconds
        pool = DriverPool(self._driver_factory)
        total = len(entries)
        logger.info(f"Processing {total} products with {self.concurrency} browser(s)")

        executor = ThreadPoolExecutor(max_workers=self.concurrency)
        try:
            futures = [
                executor.submit(self._process_pooled, entry, pool, deadline)
                for entry in entries
            ]
            for index, future in enumerate(futures, start=1):
                outcome = future.result()
                kept = report.aggregator.extend(outcome.reviews)
                report.outcomes.append(outcome)
                logger.info(
                    f"[{index}/{total}] {outcome.entry.display_name}: "
                    f"{outcome.status.value} ({kept} reviews kept)"
                )
        except BaseException:
            # Queued entries never start; in-flight ones lose their browser below
            logger.warning("Run interrupted, cancelling queued products")
            executor.shutdown(wait=False, cancel_futures=True)
            raise
        else:
            executor.shutdown(wait=True)
        finally:
            pool.close_all()

        logger.info(f"Run finished: {report.summary()}")
        return report

    def export(self, report: RunReport, output_file: Optional[Path] = None) -> Path:
        """
        Write reviews, mismatches and run status.

        Raises:
            ExportWriteFailed: any of the files could not be written
        """
        export = self._settings.export
        if output_file is not None:
            export = replace(export, output_file=Path(output_file))
        output_file, mismatch_file, status_file = (
            export.output_file, export.mismatch_file, export.status_file
        )

        self.exporter.write_reviews(report.reviews, output_file)
        self.exporter.write_mismatches(report.mismatches, mismatch_file)
        self.exporter.write_status(report.outcomes, status_file)
        return output_file

    def _process_pooled(self, entry: CatalogEntry, pool: DriverPool, deadline: float) -> ProductOutcome:
        if self._clock() >= deadline:
            logger.warning(f"Skipping '{entry.display_name}': {BUDGET_EXCEEDED}")
            return ProductOutcome(entry=entry, status=OutcomeStatus.SKIPPED, detail=BUDGET_EXCEEDED)

        try:
            driver = pool.acquire()
        except Exception as e:
            logger.exception(f"Failed to launch browser for '{entry.display_name}': {e}")
            return ProductOutcome(entry=entry, status=OutcomeStatus.SKIPPED, detail=f"browser launch failed: {e}")

        outcome = self.process_entry(entry, driver)
        if outcome.status == OutcomeStatus.SKIPPED and outcome.detail.startswith(ERROR_PREFIX):
            # Unknown browser state after an unexpected failure
            pool.discard(driver)
        else:
            pool.release(driver)
        return outcome

    # ── Product level ──────────────────────────────────────────

    def process_entry(self, entry: CatalogEntry, driver: PageDriver) -> ProductOutcome:
        """Retry-wrapped processing of one catalog entry."""
        max_attempts = max(1, self._settings.scrape.max_attempts)
        last_error = ""

        for attempt in range(1, max_attempts + 1):
            try:
                outcome = self._attempt(entry, driver)
                outcome.attempts = attempt
                return outcome
            except TransientPageError as e:
                last_error = str(e)
                logger.warning(f"Attempt {attempt}/{max_attempts} failed for '{entry.display_name}': {e}")
                if attempt < max_attempts:
                    self._sleep(self._settings.scrape.settle_interval)
            except Exception as e:
                logger.exception(f"Error processing '{entry.display_name}': {e}")
                return ProductOutcome(
                    entry=entry,
                    status=OutcomeStatus.SKIPPED,
                    attempts=attempt,
                    detail=f"{ERROR_PREFIX}{e}",
                )

        logger.warning(f"Skipping '{entry.display_name}' after {max_attempts} attempts")
        return ProductOutcome(
            entry=entry,
            status=OutcomeStatus.SKIPPED,
            attempts=max_attempts,
            detail=last_error,
        )

    def _attempt(self, entry: CatalogEntry, driver: PageDriver) -> ProductOutcome:
        candidates = self.search.find(driver, entry)
        product = self.resolver.resolve(entry, candidates)
        if product is None:
            return ProductOutcome(
                entry=entry,
                status=OutcomeStatus.NO_MATCH,
                detail=f"{len(candidates)} candidates, none matched",
            )

        reviews = self.collect_reviews(driver, product)
        if not reviews:
            return ProductOutcome(
                entry=entry,
                status=OutcomeStatus.EXTRACTION_EMPTY,
                product=product,
                detail="no reviews with text",
            )

        return ProductOutcome(
            entry=entry,
            status=OutcomeStatus.RESOLVED,
            product=product,
            reviews=reviews,
        )

    def collect_reviews(self, driver: PageDriver, product: ResolvedProduct) -> List[NormalizedReview]:
        """
        Open the product page, reveal reviews and normalize them.

        Raises:
            NavigationFailed: product page did not load
            SelectorTimeout: review section never appeared
        """
        sel = self._sel
        if driver.navigate(product.canonical_url) is NavigationStatus.FAILED:
            raise NavigationFailed(f"Could not load product page: {product.canonical_url}")

        if driver.wait_for(sel.review_section, self._wait_timeout) is WaitStatus.TIMED_OUT:
            if sel.no_reviews and driver.query(sel.no_reviews):
                logger.info(f"No reviews on page for {product.handle}")
                return []
            raise SelectorTimeout(f"Reviews did not appear for {product.handle}")

        self.paginator.run(
            driver,
            sel.review_record,
            load_more=sel.review_load_more,
            exhausted_marker=sel.review_exhausted,
            target=self.extractor.limit,
        )

        records = self.extractor.extract(driver.query(sel.review_record))
        reviews = []
        for raw in records:
            review = self.normalizer.normalize(raw, product)
            if review is not None:
                reviews.append(review)

        logger.info(f"Collected {len(reviews)} reviews for {product.handle}")
        return reviews
