"""
Entitlements component.

Pure functions for chapter-ownership sets: the persisted codec and the
"not yet owned" delta that every charging path goes through.

Invariants:
- decode(encode(s)) == s for every set of chapter ids, including the empty set
- compute_newly_owed never returns an id that is already owned
- compute_newly_owed preserves the order of the chapter list
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import (
    SEPARATOR,
    DecodeInput,
    EncodedOutput,
    EncodeInput,
    NewlyOwedInput,
    NewlyOwedOutput,
    OwnedChaptersOutput,
)

# --- Pure Functions ---


def decode(serialized: str | None) -> frozenset[int]:
    """
    Decode a persisted chapter list into an owned set.

    Empty or missing input decodes to the empty set. Blank segments are
    ignored so that trailing separators from older rows still parse.

    Raises:
        ValueError: if a segment is not an integer (corrupt row)
    """
    if not serialized:
        return frozenset()

    ids: set[int] = set()
    for part in serialized.split(SEPARATOR):
        part = part.strip()
        if not part:
            continue
        ids.add(int(part))
    return frozenset(ids)


def encode(chapter_ids: Iterable[int]) -> str:
    """Encode an owned set as an ascending, comma-separated list."""
    return SEPARATOR.join(str(cid) for cid in sorted(set(chapter_ids)))


def compute_newly_owed(
    all_chapter_ids: Iterable[int],
    already_owned: Iterable[int],
) -> tuple[int, ...]:
    """
    Return every chapter id in `all_chapter_ids` that is not owned yet.

    Order follows `all_chapter_ids`; duplicates in the input are dropped.

    Args:
        all_chapter_ids: Chapters that exist now, in publication order
        already_owned: Chapters the profile is already entitled to

    Returns:
        Tuple of chapter ids still to be charged for
    """
    owned = set(already_owned)
    owed: list[int] = []
    for cid in all_chapter_ids:
        if cid in owned:
            continue
        owned.add(cid)
        owed.append(cid)
    return tuple(owed)


def merge_owned(owned: Iterable[int], newly_owed: Iterable[int]) -> frozenset[int]:
    """Merge newly charged chapters into an owned set."""
    return frozenset(owned) | frozenset(newly_owed)


def charge_for(chapter_price: float, newly_owed: tuple[int, ...]) -> float:
    """Points owed for a set of newly entitled chapters."""
    return chapter_price * len(newly_owed)


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: DecodeInput | EncodeInput | NewlyOwedInput,
) -> OwnedChaptersOutput | EncodedOutput | NewlyOwedOutput:
    """
    Run an entitlement operation based on input type.

    Args:
        input_data: One of the input types

    Returns:
        Corresponding output type
    """
    if isinstance(input_data, DecodeInput):
        return OwnedChaptersOutput(chapter_ids=decode(input_data.serialized))

    if isinstance(input_data, EncodeInput):
        return EncodedOutput(serialized=encode(input_data.chapter_ids))

    if isinstance(input_data, NewlyOwedInput):
        return NewlyOwedOutput(
            chapter_ids=compute_newly_owed(
                input_data.all_chapter_ids,
                input_data.already_owned,
            )
        )

    raise TypeError(f"Unknown input type: {type(input_data)}")
