"""
Error Taxonomy
==============

Only CatalogLoadError and ExportWriteFailed ever reach the run level.
Page failures are retried per product and end up as a Skipped outcome.
"""


class ReviewHarvestError(Exception):
    """Base exception for review harvest errors."""
    pass


class TransientPageError(ReviewHarvestError):
    """A navigation or query failure that is worth retrying."""
    pass


class NavigationFailed(TransientPageError):
    """Raised when the page driver could not load a URL."""
    pass


class SelectorTimeout(TransientPageError):
    """Raised when an expected element never appeared."""
    pass


class CatalogLoadError(ReviewHarvestError):
    """Catalog file missing, unreadable or without a name column."""
    pass


class ExportWriteFailed(ReviewHarvestError):
    """Output file could not be written. Fatal for the run."""
    pass
