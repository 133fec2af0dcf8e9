"""
Shared fixtures: an in-memory PageDriver returning canned nodes per URL.
"""

from typing import Dict, List, Optional

import pytest

from reviewharvest.infrastructure.browser import (
    SCROLL_TO_BOTTOM,
    NavigationStatus,
    PageDriver,
    PageNode,
    TriggerStatus,
    WaitStatus,
)
from reviewharvest.infrastructure.config import (
    BrowserSettings,
    ExportSettings,
    ScrapeSettings,
    SelectorSettings,
    Settings,
    SourceSettings,
)

ORIGIN = "https://global.oliveyoung.com"
SEL = SelectorSettings()


class FakeNode(PageNode):
    def __init__(self, text=None, attrs=None, children=None):
        self._text = text
        self._attrs = attrs or {}
        self._children = children or {}

    def query(self, locator: str) -> List[PageNode]:
        return list(self._children.get(locator, []))

    def text(self) -> Optional[str]:
        return self._text

    def attribute(self, name: str) -> Optional[str]:
        return self._attrs.get(name)


class FakePageDriver(PageDriver):
    """
    pages: url -> {locator: [nodes]}. Unknown URLs fail to navigate.
    fail_navigation: number of navigations to fail before succeeding.
    """

    def __init__(self, pages: Optional[Dict[str, dict]] = None, fail_navigation: int = 0):
        self.pages = pages or {}
        self.current: dict = {}
        self.visited: List[str] = []
        self.triggered: List[str] = []
        self.closed = False
        self._fail_navigation = fail_navigation

    def navigate(self, url: str) -> NavigationStatus:
        self.visited.append(url)
        if self._fail_navigation > 0:
            self._fail_navigation -= 1
            return NavigationStatus.FAILED
        if url not in self.pages:
            return NavigationStatus.FAILED
        self.current = self.pages[url]
        return NavigationStatus.LOADED

    def query(self, locator: str) -> List[PageNode]:
        return list(self.current.get(locator, []))

    def wait_for(self, locator: str, timeout: float) -> WaitStatus:
        return WaitStatus.READY if self.query(locator) else WaitStatus.TIMED_OUT

    def trigger(self, locator: str) -> TriggerStatus:
        self.triggered.append(locator)
        if locator == SCROLL_TO_BOTTOM or self.query(locator):
            return TriggerStatus.TRIGGERED
        return TriggerStatus.NOT_FOUND

    def close(self) -> None:
        self.closed = True


# ── Page builders ──────────────────────────────────────────────

def candidate_node(product_id: str, name: str) -> FakeNode:
    return FakeNode(children={
        SEL.candidate_name: [FakeNode(attrs={"value": name})],
        SEL.candidate_id: [FakeNode(attrs={"value": product_id})],
    })


def search_page(*candidates) -> dict:
    return {SEL.search_result: [candidate_node(pid, name) for pid, name in candidates]}


def no_results_page() -> dict:
    return {SEL.no_results: [FakeNode(text="No results")]}


def review_node(body=None, name=None, date=None, pct=None, images=()) -> FakeNode:
    children = {}
    if body is not None:
        children[SEL.review_body] = [FakeNode(text=body)]
    if name is not None:
        children[SEL.reviewer_name] = [FakeNode(text=name)]
    if date is not None:
        children[SEL.review_date] = [FakeNode(text=date)]
    if pct is not None:
        children[SEL.rating_percentage] = [FakeNode(attrs={"style": f"width: {pct}%;"})]
    if images:
        children[SEL.review_image] = [FakeNode(attrs={"src": src}) for src in images]
    return FakeNode(children=children)


def product_page(*reviews) -> dict:
    return {SEL.review_record: list(reviews)}


def make_settings(tmp_path=None, **scrape_overrides) -> Settings:
    scrape = dict(
        review_limit=10,
        max_pagination_iterations=8,
        settle_interval=0,
        max_attempts=2,
        concurrency=1,
        run_budget_seconds=3600,
    )
    scrape.update(scrape_overrides)
    output = (tmp_path / "JUDGEME_OUTPUT.csv") if tmp_path is not None else None
    export = ExportSettings(shop_domain="", output_file=output) if output else ExportSettings(shop_domain="")
    return Settings(
        browser=BrowserSettings(headless=True, wait_timeout=0),
        scrape=ScrapeSettings(**scrape),
        source=SourceSettings(origin=ORIGIN),
        export=export,
    )


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)
