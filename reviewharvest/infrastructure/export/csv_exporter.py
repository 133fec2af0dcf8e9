"""
CSV Exporter - Review, Mismatch and Status Files
================================================

Every file is written to a temporary sibling first and then renamed
over the final path, so a reader never sees a half-written file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd

from ...domain import EXPORT_COLUMNS, ExportRow, ExportWriteFailed, NormalizedReview, ProductOutcome

logger = logging.getLogger(__name__)

STATUS_COLUMNS = ("product_name", "status", "review_count", "attempts", "detail")
CATALOG_COLUMNS = ("brand", "product_name")


def _atomic_write(path: Path, write) -> Path:
    """Call write(tmp_path), then move the temp file onto path."""
    path = Path(path)
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        os.close(fd)
        write(tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise ExportWriteFailed(f"Failed to write {path}: {e}") from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)
    return path


def _write_frame(path: Path, rows: List[List[str]], columns: Sequence[str]) -> Path:
    df = pd.DataFrame(rows, columns=list(columns), dtype=str)

    def write(tmp_path):
        df.to_csv(tmp_path, index=False, encoding="utf-8", lineterminator="\n")

    return _atomic_write(path, write)


class CsvExporter:
    """
    Usage:
        exporter = CsvExporter()
        exporter.write_reviews(aggregator.reviews, "JUDGEME_OUTPUT.csv")
        exporter.write_mismatches(["Ghost Product"], "JUDGEME_OUTPUT_mismatches.txt")
    """

    def write_reviews(self, reviews: Iterable[NormalizedReview], path) -> Path:
        """Write the fixed ten-column review file."""
        rows = [ExportRow.from_review(review).as_list() for review in reviews]
        _write_frame(path, rows, EXPORT_COLUMNS)
        logger.info(f"Exported {len(rows)} reviews to {path}")
        return Path(path)

    def write_mismatches(self, names: Iterable[str], path) -> Path:
        """One unresolved catalog name per line, UTF-8."""
        names = list(names)

        def write(tmp_path):
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                for name in names:
                    f.write(f"{name}\n")

        _atomic_write(path, write)
        logger.info(f"Wrote {len(names)} unmatched names to {path}")
        return Path(path)

    def write_status(self, outcomes: Iterable[ProductOutcome], path) -> Path:
        """One row per catalog entry with its final outcome."""
        rows = [
            [
                outcome.entry.display_name,
                outcome.status.value,
                str(len(outcome.reviews)),
                str(outcome.attempts),
                outcome.detail or "",
            ]
            for outcome in outcomes
        ]
        _write_frame(path, rows, STATUS_COLUMNS)
        logger.info(f"Wrote run status for {len(rows)} products to {path}")
        return Path(path)

    def write_catalog(self, items: Iterable[Sequence[str]], path) -> Path:
        """brand,product_name listing harvested from category pages."""
        rows = [[brand or "", name or ""] for brand, name in items]
        _write_frame(path, rows, CATALOG_COLUMNS)
        logger.info(f"Saved {len(rows)} catalog products to {path}")
        return Path(path)
