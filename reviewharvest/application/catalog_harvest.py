"""
Catalog Harvester - Category Listings to a Product Catalog
===========================================================

Walks category listing pages, clicks "more" until the listing is
exhausted and collects (brand, product_name) pairs. The CSV it feeds
(`brand,product_name`) loads straight into the CatalogLoader.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..infrastructure.browser import NavigationStatus, PageDriver, PageNode, WaitStatus
from ..infrastructure.config import SelectorSettings
from .pagination import PaginationController

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 50


def _node_text(node: PageNode, locator: str) -> str:
    child = node.first(locator)
    if child is None:
        return ""
    return (child.text() or "").strip()


class CatalogHarvester:
    """
    Usage:
        harvester = CatalogHarvester(settings.source.selectors, paginator)
        items = harvester.harvest(driver, ["https://.../category?ctgrNo=1"])
    """

    def __init__(
        self,
        selectors: SelectorSettings,
        paginator: Optional[PaginationController] = None,
        wait_timeout: float = 15,
    ):
        self._sel = selectors
        self._paginator = paginator or PaginationController(max_iterations=DEFAULT_MAX_PAGES)
        self._wait_timeout = wait_timeout

    def harvest(self, driver: PageDriver, urls: Iterable[str]) -> List[Tuple[str, str]]:
        items: List[Tuple[str, str]] = []
        seen = set()

        for url in urls:
            page_items = self.harvest_page(driver, url)
            added = 0
            for brand, name in page_items:
                key = (brand.casefold(), name.casefold())
                if key in seen:
                    continue
                seen.add(key)
                items.append((brand, name))
                added += 1
            logger.info(f"Extracted {added} products from: {url}")

        return items

    def harvest_page(self, driver: PageDriver, url: str) -> List[Tuple[str, str]]:
        """All (brand, name) pairs on one listing, after loading every page."""
        if driver.navigate(url) is NavigationStatus.FAILED:
            logger.warning(f"Could not load listing: {url}")
            return []

        if driver.wait_for(self._sel.listing_item, self._wait_timeout) is WaitStatus.TIMED_OUT:
            logger.warning(f"No products found on listing: {url}")
            return []

        result = self._paginator.run(
            driver,
            self._sel.listing_item,
            load_more=self._sel.listing_load_more,
            exhausted_marker=self._sel.listing_exhausted,
        )
        logger.debug(f"Listing {url} exhausted: {result.reason.value} after {result.iterations} loads")

        pairs = []
        for node in driver.query(self._sel.listing_item):
            name = _node_text(node, self._sel.listing_name)
            if not name:
                continue
            pairs.append((_node_text(node, self._sel.listing_brand), name))
        return pairs
