"""
Unit tests for the Anonymizer.
"""

from reviewharvest.domain import Anonymizer
from reviewharvest.domain.anonymizer import ANONYMOUS, DEFAULT_NAME_POOL, MASK_CHARACTERS


def test_same_label_same_pseudonym():
    anonymizer = Anonymizer()
    first = anonymizer.anonymize("J***")
    assert anonymizer.anonymize("J***") == first
    assert first == "Julia"


def test_empty_and_fully_masked_are_anonymous():
    anonymizer = Anonymizer()
    assert anonymizer.anonymize("") == ANONYMOUS
    assert anonymizer.anonymize("   ") == ANONYMOUS
    assert anonymizer.anonymize(None) == ANONYMOUS
    assert anonymizer.anonymize("*****") == ANONYMOUS


def test_two_character_prefix_lookup():
    anonymizer = Anonymizer()
    assert anonymizer.anonymize("ja****") == "Jasmine"
    assert anonymizer.anonymize("JA**") == "Jasmine"


def test_unknown_prefix_is_pooled_deterministically():
    first = Anonymizer().anonymize("Qx***")
    second = Anonymizer().anonymize("Qx*****")
    assert first == second
    assert first in DEFAULT_NAME_POOL


def test_seed_and_pool_are_injectable():
    anonymizer = Anonymizer(prefix_table={}, name_pool=["Only"], seed="fixture")
    assert anonymizer.anonymize("Zz**") == "Only"


def test_custom_table_wins():
    anonymizer = Anonymizer(prefix_table={"JA": "Jamie"})
    assert anonymizer.anonymize("Ja**") == "Jamie"


def test_unmasked_names_pass_through():
    assert Anonymizer().anonymize("  Minji  ") == "Minji"


def test_output_never_contains_mask_characters():
    anonymizer = Anonymizer()
    for label in ["J***", "ab••", "c●●●", "x＊＊", "**", "Yu*", "S"]:
        name = anonymizer.anonymize(label)
        assert not any(ch in name for ch in MASK_CHARACTERS)
