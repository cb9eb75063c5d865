# serial-ledger: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.db import LedgerSessionPort, LedgerStorePort
from src.core.ports.time import TimePort

__all__ = [
    "LedgerSessionPort",
    "LedgerStorePort",
    "TimePort",
]
