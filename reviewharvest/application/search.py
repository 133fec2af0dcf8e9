"""
Candidate Search - Storefront Search Results to SearchCandidates
================================================================

Each search result unit carries hidden `prdtName` / `prdtNo` inputs.
Those become SearchCandidates in presentation order; the resolver then
decides which one (if any) is the catalog product.
"""

import logging
from typing import List
from urllib.parse import quote

from ..domain import CatalogEntry, NavigationFailed, SearchCandidate, SelectorTimeout
from ..infrastructure.browser import NavigationStatus, PageDriver, WaitStatus
from ..infrastructure.config import SourceSettings

logger = logging.getLogger(__name__)


class CandidateSearch:
    """
    Usage:
        search = CandidateSearch(settings.source, wait_timeout=15)
        candidates = search.find(driver, entry)
    """

    def __init__(self, source: SourceSettings, wait_timeout: float = 15):
        self._source = source
        self._sel = source.selectors
        self._wait_timeout = wait_timeout

    def search_url(self, name: str) -> str:
        return self._source.origin + self._source.search_path.format(query=quote(name.strip(), safe=""))

    def detail_url(self, product_id: str) -> str:
        return self._source.origin + self._source.detail_path.format(product_id=quote(product_id, safe=""))

    def find(self, driver: PageDriver, entry: CatalogEntry) -> List[SearchCandidate]:
        """
        Run the storefront search for one catalog name.

        Raises:
            NavigationFailed: search page did not load
            SelectorTimeout: neither results nor a "no results" marker appeared
        """
        url = self.search_url(entry.display_name)
        if driver.navigate(url) is NavigationStatus.FAILED:
            raise NavigationFailed(f"Could not load search page: {url}")

        if driver.wait_for(self._sel.search_result, self._wait_timeout) is WaitStatus.TIMED_OUT:
            if self._sel.no_results and driver.query(self._sel.no_results):
                logger.info(f"Search returned no results for: {entry.display_name}")
                return []
            raise SelectorTimeout(f"Search results did not appear for: {entry.display_name}")

        candidates = []
        for unit in driver.query(self._sel.search_result):
            name_input = unit.first(self._sel.candidate_name)
            id_input = unit.first(self._sel.candidate_id)
            if name_input is None or id_input is None:
                continue

            name = (name_input.attribute("value") or "").strip()
            product_id = (id_input.attribute("value") or "").strip()
            if not name or not product_id:
                continue

            candidates.append(
                SearchCandidate(id=product_id, display_name=name, detail_url=self.detail_url(product_id))
            )

        logger.debug(f"{len(candidates)} candidates for '{entry.display_name}'")
        return candidates
