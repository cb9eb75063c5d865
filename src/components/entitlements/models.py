"""
Entitlements component models.

Data models for chapter-ownership bookkeeping.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

# --- Codec ---

SEPARATOR = ","


@dataclass(frozen=True)
class DecodeInput:
    """Input for decoding a persisted chapter list."""

    serialized: str | None


@dataclass(frozen=True)
class EncodeInput:
    """Input for encoding an owned set for persistence."""

    chapter_ids: Iterable[int]


@dataclass(frozen=True)
class OwnedChaptersOutput:
    """Decoded owned set."""

    chapter_ids: frozenset[int]


@dataclass(frozen=True)
class EncodedOutput:
    """Encoded owned set."""

    serialized: str


# --- Delta ---


@dataclass(frozen=True)
class NewlyOwedInput:
    """Input for computing which existing chapters are not owned yet."""

    all_chapter_ids: tuple[int, ...]
    already_owned: frozenset[int]


@dataclass(frozen=True)
class NewlyOwedOutput:
    """Chapters still owed, in chapter order."""

    chapter_ids: tuple[int, ...]

    @property
    def count(self) -> int:
        return len(self.chapter_ids)
