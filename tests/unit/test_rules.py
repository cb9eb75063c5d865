"""
Rules schema validation tests.

Verifies that the rules loader accepts the shipped rules.yaml, fills in
defaults and rejects malformed files.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.components import payouts, trivia
from src.rules.loader import load_rules, parse_rules


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def write_rules(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


def test_shipped_rules_load(project_root: Path) -> None:
    rules = load_rules(project_root / "rules.yaml")
    assert rules.project.slug == "serial-ledger"
    assert rules.ledger.payout_policy == "stop_on_first_insufficient_balance"
    assert rules.trivia.credit_policy == "every_correct_submission"
    assert rules.chapters.allowed_formats == ["pdf"]


def test_defaults_for_missing_sections() -> None:
    rules = parse_rules("project:\n  slug: x\n  rules_version: '1'\n")
    assert rules.chapters.max_content_chars == 100_000
    assert rules.ops.required_env == []


def test_fenced_yaml_block() -> None:
    text = "# Rules\n\n```yaml\nproject:\n  slug: fenced\n  rules_version: '2'\n```\n"
    assert parse_rules(text).project.slug == "fenced"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "absent.yaml")


def test_invalid_yaml() -> None:
    with pytest.raises(ValueError, match="Invalid YAML"):
        parse_rules("project: [unclosed")


def test_top_level_must_be_mapping() -> None:
    with pytest.raises(ValueError, match="mapping"):
        parse_rules("- a\n- b\n")


def test_unknown_policy_rejected(tmp_path: Path) -> None:
    path = write_rules(
        tmp_path,
        {
            "project": {"slug": "x", "rules_version": "1"},
            "ledger": {"payout_policy": "charge_everyone_anyway"},
        },
    )
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)


def test_unknown_section_rejected() -> None:
    with pytest.raises(ValueError):
        parse_rules("project:\n  slug: x\n  rules_version: '1'\nbilling: {}\n")


def test_non_positive_content_limit_rejected() -> None:
    with pytest.raises(ValueError):
        parse_rules(
            "project:\n  slug: x\n  rules_version: '1'\nchapters:\n  max_content_chars: 0\n"
        )


def test_component_configs_from_rules(tmp_path: Path) -> None:
    path = write_rules(
        tmp_path,
        {
            "project": {"slug": "x", "rules_version": "1"},
            "ledger": {"payout_policy": "skip_insufficient_and_continue"},
            "chapters": {"max_content_chars": 50, "allowed_formats": ["PDF", ".txt"]},
            "trivia": {"credit_policy": "first_correct_only"},
        },
    )
    rules = load_rules(path)

    payout_config = payouts.load_config_from_rules(rules)
    assert payout_config.policy == "skip_insufficient_and_continue"
    assert payout_config.max_content_chars == 50
    assert payout_config.allowed_formats == ("pdf", "txt")

    assert trivia.load_config_from_rules(rules).credit_policy == "first_correct_only"
