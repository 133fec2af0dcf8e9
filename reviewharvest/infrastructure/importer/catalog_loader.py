"""
Catalog Loader - Universal Excel/CSV Catalog Import
====================================================

Parses an Excel or CSV catalog and auto-detects the product name column
and an optional handle override column.
Supports .xlsx, .xls, and .csv formats.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ...domain import CatalogEntry, CatalogLoadError

logger = logging.getLogger(__name__)

# Common column name variations for auto-detection, most specific first
NAME_PATTERNS = ['product_name', 'productname', 'product name', 'product', 'name', 'title', 'item_name', 'item']
HANDLE_PATTERNS = ['product_handle', 'handle', 'slug']


def _clean_cell(value) -> str:
    if value is None:
        return ''
    text = " ".join(str(value).split())
    return '' if text.lower() == 'nan' else text


def entries_from_names(names: Iterable[str], handles: Optional[Dict[str, str]] = None) -> List[CatalogEntry]:
    """
    Build catalog entries from plain names, dropping blanks and repeats.

    Args:
        names: Product display names in catalog order
        handles: Optional name -> handle override mapping
    """
    handles = {_clean_cell(k): v for k, v in (handles or {}).items()}
    entries = []
    seen = set()

    for name in names:
        name = _clean_cell(name)
        key = name.casefold()
        if not name or key in seen:
            continue
        seen.add(key)
        entries.append(CatalogEntry(display_name=name, handle=handles.get(name) or None))

    return entries


class CatalogLoader:
    """
    Catalog parser with auto-detection of the product name column.

    Usage:
        loader = CatalogLoader()
        entries = loader.load("catalog.xlsx")
        # Returns: [CatalogEntry(display_name="Sun Stick", handle=None), ...]
    """

    def __init__(self):
        self.detected_columns: Dict[str, Optional[str]] = {}

    def load(self, file_path, sheet_name: Optional[str] = None) -> List[CatalogEntry]:
        """
        Parse catalog file and return unique entries in file order.

        Args:
            file_path: Path to the file (.xlsx, .xls, .csv)
            sheet_name: Optional sheet name for Excel files

        Raises:
            CatalogLoadError: file missing, unreadable or without a name column
        """
        path = Path(file_path)

        if not path.exists():
            raise CatalogLoadError(f"Catalog not found: {file_path}")

        ext = path.suffix.lower()

        try:
            if ext == '.csv':
                df = pd.read_csv(path, dtype=str, keep_default_na=False)
            elif ext in ['.xlsx', '.xls']:
                df = pd.read_excel(path, sheet_name=sheet_name or 0, dtype=str)
            else:
                raise CatalogLoadError(f"Unsupported file format: {ext}. Use .xlsx, .xls, or .csv")
        except CatalogLoadError:
            raise
        except Exception as e:
            logger.error(f"Failed to read catalog: {e}")
            raise CatalogLoadError(f"Failed to read catalog {file_path}: {e}") from e

        # Clean column names
        df.columns = df.columns.astype(str).str.strip().str.lower()

        name_col = self._find_column(df.columns, NAME_PATTERNS, exclude=HANDLE_PATTERNS)
        handle_col = self._find_column(df.columns, HANDLE_PATTERNS, exclude=[name_col])

        self.detected_columns = {
            'name': name_col,
            'handle': handle_col,
        }

        logger.info(f"Detected columns: {self.detected_columns}")

        if not name_col:
            raise CatalogLoadError(
                "Could not detect a product name column. "
                "Please ensure your file has a 'product_name' or 'name' column."
            )

        names = []
        handles = {}
        for _, row in df.iterrows():
            name = _clean_cell(row.get(name_col))
            if not name:
                continue
            names.append(name)
            if handle_col:
                handle = _clean_cell(row.get(handle_col))
                if handle and name not in handles:
                    handles[name] = handle

        entries = entries_from_names(names, handles)
        logger.info(f"Loaded {len(entries)} catalog entries from {file_path}")
        return entries

    def _find_column(
        self,
        columns: pd.Index,
        patterns: List[str],
        exclude: Optional[List[str]] = None,
    ) -> Optional[str]:
        """Find the column matching the earliest pattern."""
        candidates = [col for col in columns if col not in (exclude or [])]

        for pattern in patterns:
            for col in candidates:
                if col == pattern:
                    return col

        for pattern in patterns:
            for col in candidates:
                if pattern in col:
                    return col
        return None
