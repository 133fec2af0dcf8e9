"""
Tests for the CSV exporter: fixed schema, quoting and atomic writes.
"""

import csv

import pytest

from reviewharvest.domain import EXPORT_COLUMNS, ExportRow, ExportWriteFailed, NormalizedReview
from reviewharvest.infrastructure.export import CsvExporter


def review(**overrides):
    fields = dict(
        review_id="r1",
        product_handle="sun-stick",
        product_url="https://myshop.com/products/sun-stick",
        body="Great",
        rating=4.5,
        review_date="2024.05.01",
        reviewer_name="Julia",
        reviewer_email=None,
        picture_urls=("https://cdn/a.jpg", "https://cdn/b.jpg"),
    )
    fields.update(overrides)
    return NormalizedReview(**fields)


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_header_is_fixed_even_without_reviews(tmp_path):
    path = CsvExporter().write_reviews([], tmp_path / "out.csv")
    assert path.read_text(encoding="utf-8") == ",".join(EXPORT_COLUMNS) + "\n"


def test_row_follows_column_order(tmp_path):
    path = CsvExporter().write_reviews([review()], tmp_path / "out.csv")
    rows = read_rows(path)

    assert rows[0] == list(EXPORT_COLUMNS)
    assert rows[1] == [
        "", "Great", "4.5", "2024.05.01", "Julia", "",
        "https://myshop.com/products/sun-stick",
        "https://cdn/a.jpg, https://cdn/b.jpg",
        "", "sun-stick",
    ]


def test_export_row_ignores_internal_field_order():
    a = review()
    b = NormalizedReview(
        picture_urls=a.picture_urls, reviewer_email=None, reviewer_name=a.reviewer_name,
        review_date=a.review_date, rating=a.rating, body=a.body, product_url=a.product_url,
        product_handle=a.product_handle, review_id=a.review_id,
    )
    assert ExportRow.from_review(a).as_list() == ExportRow.from_review(b).as_list()
    assert list(ExportRow.from_review(a).as_dict()) == list(EXPORT_COLUMNS)


def test_missing_values_are_empty_not_null(tmp_path):
    path = CsvExporter().write_reviews(
        [review(rating=None, review_date=None, picture_urls=())], tmp_path / "out.csv"
    )
    text = path.read_text(encoding="utf-8")
    assert "null" not in text and "None" not in text and "nan" not in text
    row = read_rows(path)[1]
    assert row[2] == "" and row[3] == "" and row[7] == ""


def test_delimiters_and_quotes_are_escaped(tmp_path):
    body = 'Love it, "holy grail"\nsecond line'
    path = CsvExporter().write_reviews([review(body=body)], tmp_path / "out.csv")
    assert read_rows(path)[1][1] == body


def test_no_temp_files_left_behind(tmp_path):
    CsvExporter().write_reviews([review()], tmp_path / "out.csv")
    assert [p.name for p in tmp_path.iterdir()] == ["out.csv"]


def test_write_failure_is_fatal_and_cleans_up(tmp_path):
    target = tmp_path / "taken"
    target.mkdir()
    with pytest.raises(ExportWriteFailed):
        CsvExporter().write_reviews([review()], target)
    assert [p.name for p in tmp_path.iterdir()] == ["taken"]


def test_mismatch_file_one_name_per_line(tmp_path):
    path = CsvExporter().write_mismatches(["Ghost Product", "설화수 크림"], tmp_path / "miss.txt")
    assert path.read_text(encoding="utf-8") == "Ghost Product\n설화수 크림\n"


def test_catalog_file(tmp_path):
    path = CsvExporter().write_catalog([("ROUND LAB", "Dokdo Toner, 200ml")], tmp_path / "catalog.csv")
    assert read_rows(path) == [["brand", "product_name"], ["ROUND LAB", "Dokdo Toner, 200ml"]]
