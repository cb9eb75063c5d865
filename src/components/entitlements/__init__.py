"""
Entitlements component.

Public API for chapter-ownership sets and the newly-owed delta.
"""

from .component import (
    charge_for,
    compute_newly_owed,
    decode,
    encode,
    merge_owned,
    run,
)
from .models import (
    SEPARATOR,
    DecodeInput,
    EncodedOutput,
    EncodeInput,
    NewlyOwedInput,
    NewlyOwedOutput,
    OwnedChaptersOutput,
)

__all__ = [
    # Functions
    "charge_for",
    "compute_newly_owed",
    "decode",
    "encode",
    "merge_owned",
    "run",
    # Models
    "DecodeInput",
    "EncodeInput",
    "EncodedOutput",
    "NewlyOwedInput",
    "NewlyOwedOutput",
    "OwnedChaptersOutput",
    "SEPARATOR",
]
