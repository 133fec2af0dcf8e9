"""
Unit tests for the Review Aggregator.
"""

from reviewharvest.domain import NormalizedReview, ReviewAggregator


def review(handle="sun-stick", body="Great", name="Julia", rating=5.0):
    return NormalizedReview(
        review_id=f"{handle}-{body}-{name}",
        product_handle=handle,
        product_url=f"https://myshop.com/products/{handle}",
        body=body,
        rating=rating,
        review_date=None,
        reviewer_name=name,
    )


def test_duplicates_collapse_first_seen_wins():
    aggregator = ReviewAggregator()
    assert aggregator.add(review(name="Julia", rating=5.0)) is True
    assert aggregator.add(review(name="Mia", rating=1.0)) is False

    assert len(aggregator) == 1
    assert aggregator.reviews[0].reviewer_name == "Julia"
    assert aggregator.reviews[0].rating == 5.0
    assert aggregator.duplicates == 1


def test_same_body_on_different_products_is_kept():
    aggregator = ReviewAggregator()
    kept = aggregator.extend([review(handle="a"), review(handle="b")])
    assert kept == 2


def test_insertion_order_is_preserved():
    aggregator = ReviewAggregator()
    aggregator.extend([review(body="one"), review(body="two"), review(body="three")])
    assert [r.body for r in aggregator.reviews] == ["one", "two", "three"]
