"""Sequential textual identifiers of the form PREFIX + zero-padded number.

``next_id`` derives the next identifier from a set of existing ones. On its
own that is only safe for a single writer; persisted allocation goes through
``crud.reserve_ids``, which advances a locked counter row instead.
"""
from typing import Iterable, Optional, Set


class IdSpaceExhaustedError(ValueError):
    """The next number no longer fits in the configured width."""


def _parse_suffix(suffix: str) -> int:
    try:
        return int(suffix)
    except ValueError:
        return 0


def max_sequence(existing_ids: Optional[Iterable[str]], prefix: str, width: int) -> int:
    """Largest numeric suffix among ids shaped like ``prefix`` + ``width`` digits, else 0.

    Ids with the wrong prefix or length are ignored; an unparsable suffix
    counts as 0 rather than failing.
    """
    expected_length = len(prefix) + width
    numbers = [
        _parse_suffix(existing[len(prefix):])
        for existing in (existing_ids or ())
        if existing and existing.startswith(prefix) and len(existing) == expected_length
    ]
    return max(numbers, default=0)


def format_id(prefix: str, number: int, width: int) -> str:
    if number < 0 or number >= 10 ** width:
        raise IdSpaceExhaustedError(f"{number} does not fit in {width} digits for prefix {prefix!r}")
    return f"{prefix}{number:0{width}d}"


def next_id(existing_ids: Optional[Iterable[str]], prefix: str, width: int) -> str:
    return format_id(prefix, max_sequence(existing_ids, prefix, width) + 1, width)


class InMemoryIdAllocator:
    """Hands out successive ids, continuing from the ids it was seeded with.

    Every id it issues is remembered, so consecutive calls never repeat.
    Not shared between processes or sessions.
    """

    def __init__(self, existing_ids: Optional[Iterable[str]], prefix: str, width: int):
        self.prefix = prefix
        self.width = width
        self._issued: Set[str] = set(existing_ids or ())

    def __call__(self) -> str:
        new_id = next_id(self._issued, self.prefix, self.width)
        self._issued.add(new_id)
        return new_id
