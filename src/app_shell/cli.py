import argparse
import logging
import os
import sys
from pathlib import Path

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteLedgerStore
from src.components import payouts, trivia
from src.components.payouts import PublishChapterInput, run_publish_chapter
from src.components.trivia import AnswerInput, run_answer
from src.rules.loader import load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("LEDGER_DATA_DIR", "./data")
DB_PATH = str(Path(DATA_DIR) / "ledger.db")
MIGRATIONS_DIR = "migrations"
RULES_PATH = "rules.yaml"


def get_rules() -> Rules:
    if not Path(RULES_PATH).exists():
        logger.error("Rules file %s not found.", RULES_PATH)
        sys.exit(1)
    return load_rules(Path(RULES_PATH))


def handle_migrate(args: argparse.Namespace) -> int:
    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(args.db, MIGRATIONS_DIR).run_migrations()
    print(f"Applied {len(applied)} migrations.")
    return 0


def handle_publish_chapter(args: argparse.Namespace) -> int:
    rules = get_rules()
    content_path = Path(args.content_file)
    if not content_path.exists():
        logger.error("Content file %s not found.", content_path)
        return 1

    result = run_publish_chapter(
        PublishChapterInput(
            book_id=args.book_id,
            name=args.name,
            content=content_path.read_text(),
            source_format=args.format,
            mark_book_finished=True if args.finished else None,
        ),
        store=SQLiteLedgerStore(args.db),
        config=payouts.load_config_from_rules(rules),
    )
    if not result.success:
        for error in result.errors:
            logger.error("%s: %s", error.code, error.message)
        return 1

    print(result.message)
    return 0


def handle_answer(args: argparse.Namespace) -> int:
    rules = get_rules()
    result = run_answer(
        AnswerInput(
            question_id=args.question_id,
            answer_id=args.answer_id,
            profile_id=args.profile_id,
        ),
        store=SQLiteLedgerStore(args.db),
        config=trivia.load_config_from_rules(rules),
    )
    if not result.success:
        for error in result.errors:
            logger.error("%s: %s", error.code, error.message)
        return 1

    verdict = "Correct" if result.was_correct else "Wrong"
    print(f"{verdict}. The answer was: {result.correct_content}")
    if result.points_awarded:
        print(f"Awarded {result.points_awarded:g} points.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serial Ledger CLI")
    parser.add_argument("--db", default=DB_PATH, help="Path to the SQLite database")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # publish-chapter
    publish_parser = subparsers.add_parser(
        "publish-chapter", help="Publish a chapter and charge subscribers"
    )
    publish_parser.add_argument("book_id", type=int)
    publish_parser.add_argument("name", help="Chapter title")
    publish_parser.add_argument("content_file", help="File holding the extracted chapter text")
    publish_parser.add_argument("--format", default="pdf", help="Declared upload format")
    publish_parser.add_argument(
        "--finished", action="store_true", help="Mark the book as finished"
    )

    # answer
    answer_parser = subparsers.add_parser("answer", help="Answer a daily question")
    answer_parser.add_argument("question_id", type=int)
    answer_parser.add_argument("answer_id", type=int)
    answer_parser.add_argument("--profile-id", type=int, required=True)

    args = parser.parse_args(argv)

    if args.command == "migrate":
        return handle_migrate(args)
    if args.command == "publish-chapter":
        return handle_publish_chapter(args)
    if args.command == "answer":
        return handle_answer(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
