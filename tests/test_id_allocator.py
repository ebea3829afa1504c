import pytest

from id_allocator import (
    IdSpaceExhaustedError,
    InMemoryIdAllocator,
    format_id,
    max_sequence,
    next_id,
)


def test_first_id_when_nothing_exists():
    assert next_id(set(), "QRS", 7) == "QRS0000001"
    assert next_id(None, "QRS", 7) == "QRS0000001"


def test_continues_after_highest_existing():
    assert next_id({"QRS0000003", "QRS0000007"}, "QRS", 7) == "QRS0000008"


def test_non_numeric_suffix_counts_as_zero():
    assert next_id({"QRSabcdefg"}, "QRS", 7) == "QRS0000001"
    assert next_id({"QRSabcdefg", "QRS0000002"}, "QRS", 7) == "QRS0000003"


def test_other_prefixes_and_lengths_are_ignored():
    existing = {"APP0000009", "QRS00000099", "QRS99", "QRP0000050"}
    assert max_sequence(existing, "QRS", 7) == 0
    assert next_id(existing, "QRS", 7) == "QRS0000001"


def test_new_id_is_never_an_existing_one():
    existing = {"QRS0000001", "QRS0000002", "QRSxx00003", "QRS0000010"}
    assert next_id(existing, "QRS", 7) not in existing


def test_format_id_pads_to_width():
    assert format_id("APP", 42, 7) == "APP0000042"


def test_format_id_rejects_numbers_wider_than_width():
    with pytest.raises(IdSpaceExhaustedError):
        format_id("QRS", 10_000_000, 7)

    with pytest.raises(ValueError):
        next_id({"QRS9999999"}, "QRS", 7)


def test_in_memory_allocator_hands_out_successive_ids():
    allocate = InMemoryIdAllocator({"QRS0000004"}, "QRS", 7)

    issued = [allocate(), allocate(), allocate()]

    assert issued == ["QRS0000005", "QRS0000006", "QRS0000007"]
    assert len(set(issued)) == 3
