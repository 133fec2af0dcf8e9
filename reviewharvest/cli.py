"""
Review Harvest - Command Line Entry Point
=========================================

Collect reviews for a catalog:
    reviewharvest scrape --catalog catalog.xlsx --shop-domain https://myshop.com

Single product with a fixed handle:
    reviewharvest scrape --product "Sun Stick" --handle sun-stick --shop-domain https://myshop.com

Build a catalog from category pages:
    reviewharvest harvest-catalog "https://global.oliveyoung.com/display/category?ctgrNo=1" --output catalog.csv
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .application import CatalogHarvester, PaginationController, ReviewPipeline
from .application.catalog_harvest import DEFAULT_MAX_PAGES
from .domain import CatalogEntry, CatalogLoadError, ExportWriteFailed, OutcomeStatus
from .infrastructure.config import Settings, get_settings
from .infrastructure.export import CsvExporter
from .infrastructure.importer import CatalogLoader, entries_from_names

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _selenium_factory(settings: Settings):
    from .infrastructure.browser.selenium_driver import SeleniumPageDriver

    def factory():
        return SeleniumPageDriver(settings.browser)
    return factory


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    parser = argparse.ArgumentParser(
        prog="reviewharvest",
        description="Collect storefront reviews into a bulk-import CSV",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scrape = sub.add_parser("scrape", parents=[common], help="Collect reviews for catalog products")
    scrape.add_argument("--catalog", type=Path, help="Catalog file (.csv, .xlsx, .xls)")
    scrape.add_argument("--sheet", help="Sheet name for Excel catalogs")
    scrape.add_argument(
        "--product", action="append", default=[], metavar="NAME",
        help="Product name to look up (repeatable)",
    )
    scrape.add_argument("--handle", help="Handle override, only with a single --product")
    scrape.add_argument("--output", type=Path, help="Review CSV path (default: JUDGEME_OUTPUT.csv)")
    scrape.add_argument("--shop-domain", help="Target shop domain used for product_url")
    scrape.add_argument("--limit", type=int, help="Reviews per product (default: 10)")
    scrape.add_argument("--concurrency", type=int, help="Parallel browsers, 1-3 (default: 1)")
    scrape.add_argument("--max-attempts", type=int, help="Attempts per product (default: 2)")
    scrape.add_argument("--budget", type=float, help="Run budget in seconds (default: 3600)")
    scrape.add_argument("--headful", action="store_true", help="Show the browser window")

    harvest = sub.add_parser("harvest-catalog", parents=[common], help="Build a catalog from category pages")
    harvest.add_argument("urls", nargs="+", help="Category listing URLs")
    harvest.add_argument("--output", type=Path, default=Path("catalog.csv"), help="Catalog CSV path")
    harvest.add_argument(
        "--max-pages", type=int, default=DEFAULT_MAX_PAGES,
        help=f"Max 'more' clicks per listing (default: {DEFAULT_MAX_PAGES})",
    )
    harvest.add_argument("--headful", action="store_true", help="Show the browser window")

    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of settings with CLI flags applied."""
    browser = settings.browser
    if getattr(args, "headful", False):
        browser = replace(browser, headless=False)

    scrape = settings.scrape
    for flag, name in (
        ("limit", "review_limit"),
        ("concurrency", "concurrency"),
        ("max_attempts", "max_attempts"),
        ("budget", "run_budget_seconds"),
    ):
        value = getattr(args, flag, None)
        if value is not None:
            scrape = replace(scrape, **{name: value})

    export = settings.export
    if getattr(args, "shop_domain", None):
        export = replace(export, shop_domain=args.shop_domain.strip().rstrip("/"))
    if getattr(args, "output", None) and args.command == "scrape":
        export = replace(export, output_file=args.output)

    return replace(settings, browser=browser, scrape=scrape, export=export)


def load_entries(args: argparse.Namespace) -> List[CatalogEntry]:
    """
    Catalog file entries followed by --product names.

    Raises:
        CatalogLoadError: unreadable catalog, or --handle misuse
    """
    if args.handle and (len(args.product) != 1 or args.catalog):
        raise CatalogLoadError("--handle needs exactly one --product and no --catalog")

    names = []
    handles = {}
    if args.catalog:
        for entry in CatalogLoader().load(args.catalog, sheet_name=args.sheet):
            names.append(entry.display_name)
            if entry.handle:
                handles[entry.display_name] = entry.handle

    names.extend(args.product)
    if args.handle:
        handles[args.product[0].strip()] = args.handle

    return entries_from_names(names, handles)


def run_scrape(args: argparse.Namespace, settings: Settings) -> int:
    print("\n" + "=" * 60)
    print("   Review Harvest - Review Collection")
    print("=" * 60 + "\n")

    for issue in settings.validate():
        logger.warning(issue)

    try:
        entries = load_entries(args)
    except CatalogLoadError as e:
        logger.error(f"Catalog load failed: {e}")
        return EXIT_FATAL

    if not entries:
        logger.error("No products to process. Pass --catalog or --product.")
        return EXIT_FATAL

    print(f"Found {len(entries)} products\n")

    pipeline = ReviewPipeline(settings, driver_factory=_selenium_factory(settings))
    report = pipeline.run(entries)

    try:
        output = pipeline.export(report)
    except ExportWriteFailed as e:
        logger.error(f"Export failed: {e}")
        return EXIT_FATAL

    stats = report.summary()
    print("\n" + "=" * 60)
    print("Run Complete!")
    print(
        f"   Products: {stats['total']} | Resolved: {stats[OutcomeStatus.RESOLVED.value]} | "
        f"No match: {stats[OutcomeStatus.NO_MATCH.value]} | "
        f"Empty: {stats[OutcomeStatus.EXTRACTION_EMPTY.value]} | "
        f"Skipped: {stats[OutcomeStatus.SKIPPED.value]}"
    )
    print(f"   Reviews: {stats['reviews']} -> {output}")
    print(f"   Unmatched: {settings.export.mismatch_file}")
    print("=" * 60 + "\n")
    return EXIT_OK


def run_harvest(args: argparse.Namespace, settings: Settings) -> int:
    paginator = PaginationController(
        max_iterations=args.max_pages,
        settle_interval=settings.scrape.settle_interval,
    )
    harvester = CatalogHarvester(
        settings.source.selectors,
        paginator=paginator,
        wait_timeout=settings.browser.wait_timeout,
    )

    driver = _selenium_factory(settings)()
    try:
        items = harvester.harvest(driver, args.urls)
    finally:
        driver.close()

    try:
        CsvExporter().write_catalog(items, args.output)
    except ExportWriteFailed as e:
        logger.error(f"Export failed: {e}")
        return EXIT_FATAL

    print(f"Saved {len(items)} products to {args.output}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        settings = apply_overrides(get_settings(), args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_FATAL

    try:
        if args.command == "harvest-catalog":
            return run_harvest(args, settings)
        return run_scrape(args, settings)
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        print("\nInterrupted! No output written.")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
