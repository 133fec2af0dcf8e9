"""
Anonymizer - Masked Reviewer Labels to Pseudonyms
==================================================

The storefront shows reviewers as a short prefix plus mask characters
("Ja****"). Those labels are never exported as-is:

1. Strip the mask characters, keep the first 1-2 visible characters.
2. Look the prefix up in a fixed table of pseudonyms.
3. Unknown prefixes are hashed (SHA-256, not Python's salted hash())
   into a bounded name pool, so the same prefix always gives the same
   pseudonym, across threads and across runs.

Empty or fully masked labels become "Anonymous". Labels without any
mask character are real display names already chosen by the reviewer
and pass through trimmed.
"""

import hashlib
import logging
import threading
from typing import Dict, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"

MASK_CHARACTERS = "*•●＊"

PREFIX_LENGTH = 2

# Common visible prefixes -> pseudonym
DEFAULT_PREFIX_TABLE: Dict[str, str] = {
    "a": "Alex", "an": "Anna", "al": "Alice", "am": "Amelia",
    "b": "Bella", "be": "Bethany", "br": "Brooke",
    "c": "Chloe", "ch": "Charlotte", "ca": "Camila", "cl": "Claire",
    "d": "Daisy", "da": "Daniel", "de": "Dee",
    "e": "Emma", "el": "Ella", "em": "Emily", "ev": "Eva",
    "f": "Fiona", "g": "Grace", "ga": "Gabby",
    "h": "Hannah", "ha": "Hailey", "he": "Helen",
    "i": "Iris", "is": "Isla",
    "j": "Julia", "ja": "Jasmine", "je": "Jenny", "jo": "Joanne", "ju": "June",
    "k": "Kate", "ka": "Karen", "ki": "Kim",
    "l": "Lily", "la": "Laura", "li": "Lina", "lu": "Lucy",
    "m": "Mia", "ma": "Maya", "me": "Megan", "mi": "Minji",
    "n": "Nina", "na": "Naomi",
    "o": "Olivia", "p": "Paige", "r": "Rose", "ra": "Rachel",
    "s": "Sophie", "sa": "Sarah", "se": "Seoyeon", "so": "Sofia", "su": "Sumin",
    "t": "Tara", "v": "Vivian", "y": "Yuna", "yu": "Yujin", "z": "Zoe",
}

DEFAULT_NAME_POOL = (
    "Avery", "Blair", "Casey", "Dana", "Emery", "Finley", "Harper", "Jordan",
    "Kendall", "Logan", "Morgan", "Noel", "Parker", "Quinn", "Reese", "Riley",
    "Rowan", "Sage", "Skyler", "Taylor",
)


class Anonymizer:
    """
    Deterministic masked-name to pseudonym mapping.

    Usage:
        anonymizer = Anonymizer()
        anonymizer.anonymize("J***")   # same pseudonym every call
        anonymizer.anonymize("")       # "Anonymous"

    The table, pool and seed can be injected for reproducible fixtures.
    """

    def __init__(
        self,
        prefix_table: Optional[Mapping[str, str]] = None,
        name_pool: Optional[Sequence[str]] = None,
        seed: str = "",
    ):
        self._table = {
            key.casefold(): value
            for key, value in (prefix_table if prefix_table is not None else DEFAULT_PREFIX_TABLE).items()
        }
        self._pool = tuple(name_pool or DEFAULT_NAME_POOL)
        self._seed = seed
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def anonymize(self, label: Optional[str]) -> str:
        if label is None:
            return ANONYMOUS
        label = label.strip()
        if not label:
            return ANONYMOUS

        if not any(ch in MASK_CHARACTERS for ch in label):
            return label

        prefix = self.visible_prefix(label)
        if not prefix:
            return ANONYMOUS

        with self._lock:
            name = self._cache.get(prefix)
            if name is None:
                name = self._lookup(prefix)
                self._cache[prefix] = name
        return name

    @staticmethod
    def visible_prefix(label: str) -> str:
        visible = "".join(
            ch for ch in label if ch not in MASK_CHARACTERS and not ch.isspace()
        )
        return visible[:PREFIX_LENGTH].casefold()

    def _lookup(self, prefix: str) -> str:
        name = self._table.get(prefix)
        if name:
            return name
        digest = hashlib.sha256(f"{self._seed}:{prefix}".encode("utf-8")).hexdigest()
        name = self._pool[int(digest, 16) % len(self._pool)]
        logger.debug(f"Prefix '{prefix}' not in table, pooled as {name}")
        return name
