import logging
import os
import sys
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def missing_env(rules: Rules) -> list[str]:
    return [name for name in rules.ops.required_env if name not in os.environ]


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Exits the process when a required env var is missing or the data
    directory is required but absent.
    """
    ops = rules.ops

    # 1. Check Data Dir
    if ops.data_dir_required and not data_dir.is_dir():
        logger.critical("Data directory %s does not exist", data_dir)
        sys.exit(1)

    # 2. Check Required Env
    missing = missing_env(rules)
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    logger.info("Configuration validated.")
