import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteLedgerStore
from src.components import payouts, trivia
from src.components.payouts import PayoutConfig
from src.components.trivia import TriviaConfig
from src.core.ports.db import LedgerStorePort
from src.core.ports.time import TimePort
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("LEDGER_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "ledger.db")
        self.migrations_dir = self.base_dir / "migrations"
        self.rules_path = self.base_dir / "rules.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(str(settings.rules_path))


@lru_cache
def _load_rules_cached(path: str) -> Rules:
    return load_rules(Path(path))


def get_payout_config(rules: Rules = Depends(get_rules)) -> PayoutConfig:
    return payouts.load_config_from_rules(rules)


def get_trivia_config(rules: Rules = Depends(get_rules)) -> TriviaConfig:
    return trivia.load_config_from_rules(rules)


# --- Store ---
def get_store(settings: Settings = Depends(get_settings)) -> LedgerStorePort:
    return SQLiteLedgerStore(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> TimePort:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Caller identity ---


@dataclass(frozen=True)
class Caller:
    profile_id: int
    roles: frozenset[str] = frozenset()

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles


def get_current_caller(
    x_profile_id: Annotated[int | None, Header()] = None,
    x_profile_roles: Annotated[str | None, Header()] = None,
) -> Caller:
    """
    The authenticated caller.

    Authentication happens upstream; the gateway forwards the resolved
    profile in X-Profile-Id and its roles, comma separated, in
    X-Profile-Roles.
    """
    if x_profile_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    roles = frozenset(r.strip().lower() for r in (x_profile_roles or "").split(",") if r.strip())
    return Caller(profile_id=x_profile_id, roles=roles)


def get_current_profile_id(caller: Caller = Depends(get_current_caller)) -> int:
    return caller.profile_id


def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return caller
