"""
Page Driver - Abstraction Layer for the Controlled Browser
===========================================================

The pipeline never reads markup. It only calls four operations and
interprets their results:

    navigate(url)              -> NavigationStatus
    query(locator)             -> list of opaque PageNode handles
    wait_for(locator, timeout) -> WaitStatus
    trigger(locator)           -> TriggerStatus

USAGE:
    with SeleniumPageDriver(settings.browser) as driver:
        if driver.navigate(url) is NavigationStatus.LOADED:
            nodes = driver.query(".product-review-unit")

Tests use an in-memory implementation that returns canned nodes.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

# Reserved trigger locator: scroll to the bottom instead of clicking
SCROLL_TO_BOTTOM = "::scroll-to-bottom"


class NavigationStatus(Enum):
    LOADED = "loaded"
    FAILED = "navigation_failed"


class WaitStatus(Enum):
    READY = "ready"
    TIMED_OUT = "timed_out"


class TriggerStatus(Enum):
    TRIGGERED = "triggered"
    NOT_FOUND = "not_found"


class PageNode(ABC):
    """
    Opaque handle to one element on the page.
    Missing children, text or attributes give None/empty, never an exception.
    """

    @abstractmethod
    def query(self, locator: str) -> List["PageNode"]:
        """Child nodes matching the locator, in document order."""
        ...

    @abstractmethod
    def text(self) -> Optional[str]:
        """Rendered text of the node, or None."""
        ...

    @abstractmethod
    def attribute(self, name: str) -> Optional[str]:
        """Attribute/property value, or None."""
        ...

    def first(self, locator: str) -> Optional["PageNode"]:
        nodes = self.query(locator)
        return nodes[0] if nodes else None


class PageDriver(ABC):
    """
    Abstract base class for page drivers.
    Implement this interface to add new browser backends.
    """

    @abstractmethod
    def navigate(self, url: str) -> NavigationStatus:
        """Load a URL."""
        ...

    @abstractmethod
    def query(self, locator: str) -> List[PageNode]:
        """All nodes on the current page matching the locator (possibly empty)."""
        ...

    @abstractmethod
    def wait_for(self, locator: str, timeout: float) -> WaitStatus:
        """Wait until at least one node matches the locator."""
        ...

    @abstractmethod
    def trigger(self, locator: str) -> TriggerStatus:
        """Activate a control, or scroll for SCROLL_TO_BOTTOM."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Clean up resources."""
        ...

    def __enter__(self) -> "PageDriver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
