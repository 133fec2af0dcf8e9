"""
Tests for harvesting a catalog from category listing pages.
"""

from reviewharvest.application import CatalogHarvester, PaginationController

from conftest import SEL, FakeNode, FakePageDriver


def listing_item(brand, name):
    return FakeNode(children={
        SEL.listing_brand: [FakeNode(text=brand)],
        SEL.listing_name: [FakeNode(text=name)],
    })


def make_harvester():
    paginator = PaginationController(max_iterations=5, settle_interval=0, sleep=lambda _: None)
    return CatalogHarvester(SEL, paginator=paginator, wait_timeout=0)


def test_harvest_dedups_across_listings():
    pages = {
        "https://src/cat/1": {
            SEL.listing_item: [listing_item("ROUND LAB", "Dokdo Toner"), listing_item("SKIN1004", "Centella Ampoule")],
            SEL.listing_exhausted: [FakeNode()],
        },
        "https://src/cat/2": {
            SEL.listing_item: [listing_item("round lab", "DOKDO TONER"), listing_item("Torriden", "Dive-in Serum")],
            SEL.listing_exhausted: [FakeNode()],
        },
    }
    driver = FakePageDriver(pages)

    items = make_harvester().harvest(driver, list(pages))

    assert items == [
        ("ROUND LAB", "Dokdo Toner"),
        ("SKIN1004", "Centella Ampoule"),
        ("Torriden", "Dive-in Serum"),
    ]
    assert driver.triggered == []


def test_harvest_clicks_more_until_idle():
    pages = {
        "https://src/cat/1": {
            SEL.listing_item: [listing_item("A", "One")],
            SEL.listing_load_more: [FakeNode()],
        },
    }
    driver = FakePageDriver(pages)

    items = make_harvester().harvest(driver, list(pages))

    assert items == [("A", "One")]
    assert driver.triggered == [SEL.listing_load_more, SEL.listing_load_more]


def test_unreachable_or_empty_listings_are_skipped():
    pages = {
        "https://src/cat/empty": {},
        "https://src/cat/nameless": {SEL.listing_item: [FakeNode()], SEL.listing_exhausted: [FakeNode()]},
    }
    items = make_harvester().harvest(FakePageDriver(pages), ["https://src/missing", *pages])
    assert items == []
