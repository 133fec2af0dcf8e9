"""
Product Resolver - Catalog Name to Storefront Product
======================================================

MATCHING POLICY (first rule that finds something wins):
1. Exact, case-insensitive name equality
2. Case-insensitive containment, in either direction
3. Nothing else. An unmatched name is a NoMatch (None), never
   "the first search result", so reviews can't land on the wrong product.

Ties inside a rule go to the earliest candidate in presentation order.
"""

import logging
from typing import List, Optional, Sequence

from .models import CatalogEntry, ResolvedProduct, SearchCandidate
from .normalizer import sanitize_handle

logger = logging.getLogger(__name__)


def _match_key(name: Optional[str]) -> str:
    """Case- and whitespace-insensitive comparison key."""
    if not name:
        return ""
    return " ".join(name.split()).casefold()


class ProductResolver:
    """
    Picks the storefront product for a catalog entry.

    Usage:
        resolver = ProductResolver()
        product = resolver.resolve(entry, candidates)
        if product is None:
            ...  # NoMatch
    """

    def resolve(
        self,
        entry: CatalogEntry,
        candidates: Sequence[SearchCandidate],
    ) -> Optional[ResolvedProduct]:
        candidate = self.best_candidate(entry, candidates)
        if candidate is None:
            logger.warning(f"No matching product found for: {entry.display_name}")
            return None

        logger.info(
            f"Resolved '{entry.display_name}' -> '{candidate.display_name}' "
            f"(id={candidate.id})"
        )
        return ResolvedProduct(
            product_id=candidate.id,
            handle=self.handle_for(entry, candidate),
            canonical_url=candidate.detail_url,
            source_entry=entry,
        )

    def best_candidate(
        self,
        entry: CatalogEntry,
        candidates: Sequence[SearchCandidate],
    ) -> Optional[SearchCandidate]:
        wanted = _match_key(entry.display_name)
        if not wanted:
            return None

        named: List[tuple] = [
            (_match_key(c.display_name), c) for c in candidates
        ]
        named = [(key, c) for key, c in named if key]

        for key, candidate in named:
            if key == wanted:
                return candidate

        for key, candidate in named:
            if wanted in key or key in wanted:
                return candidate

        return None

    @staticmethod
    def handle_for(entry: CatalogEntry, candidate: SearchCandidate) -> str:
        """Catalog override first, then the catalog name, then the source id."""
        for source in (entry.handle, entry.display_name):
            handle = sanitize_handle(source)
            if handle:
                return handle
        return sanitize_handle(f"product-{candidate.id}")
