"""
Unit tests for the storefront Candidate Search.
"""

import pytest

from reviewharvest.application import CandidateSearch
from reviewharvest.domain import CatalogEntry, NavigationFailed, SearchCandidate, SelectorTimeout
from reviewharvest.infrastructure.config import SourceSettings

from conftest import ORIGIN, FakeNode, FakePageDriver, SEL, candidate_node, no_results_page, search_page


@pytest.fixture
def search():
    return CandidateSearch(SourceSettings(origin=ORIGIN), wait_timeout=0)


def test_search_url_encodes_name(search):
    assert search.search_url("Sun Stick 19g") == f"{ORIGIN}/display/search?query=Sun%20Stick%2019g"


def test_detail_url(search):
    assert search.detail_url("GA123") == f"{ORIGIN}/product/detail?prdtNo=GA123&dataSource=search_result"


def test_candidates_in_presentation_order(search):
    entry = CatalogEntry("Sun Stick")
    driver = FakePageDriver({search.search_url("Sun Stick"): search_page(("1", "Sun Stick"), ("2", "Toner"))})

    candidates = search.find(driver, entry)

    assert candidates == [
        SearchCandidate("1", "Sun Stick", search.detail_url("1")),
        SearchCandidate("2", "Toner", search.detail_url("2")),
    ]


def test_units_without_inputs_are_skipped(search):
    page = search_page(("1", "Sun Stick"))
    page[SEL.search_result].insert(0, FakeNode())
    page[SEL.search_result].append(candidate_node("", "No id"))
    driver = FakePageDriver({search.search_url("Sun Stick"): page})

    assert [c.id for c in search.find(driver, CatalogEntry("Sun Stick"))] == ["1"]


def test_no_results_marker_gives_empty_list(search):
    driver = FakePageDriver({search.search_url("Ghost"): no_results_page()})
    assert search.find(driver, CatalogEntry("Ghost")) == []


def test_missing_results_without_marker_times_out(search):
    driver = FakePageDriver({search.search_url("Ghost"): {}})
    with pytest.raises(SelectorTimeout):
        search.find(driver, CatalogEntry("Ghost"))


def test_navigation_failure_raises(search):
    with pytest.raises(NavigationFailed):
        search.find(FakePageDriver(), CatalogEntry("Sun Stick"))
