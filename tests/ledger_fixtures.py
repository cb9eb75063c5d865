"""Seed helpers shared by the store-backed tests."""

from datetime import UTC, datetime, timedelta

from src.domain.entities import Book, Chapter, Profile

AUTHOR_ID = 1
READER_ID = 2
BOOK_ID = 100
CHAPTER_PRICE = 5.0


def seed_book_world(store, reader_points: float = 12.0, chapters: int = 2) -> None:
    """
    Author, one reader and an approved book priced CHAPTER_PRICE per
    chapter with chapters 1..n.
    """
    created = datetime(2026, 1, 1, tzinfo=UTC)
    with store.transaction() as session:
        session.save_profile(Profile(id=AUTHOR_ID, user_id="author", points=0))
        session.save_profile(Profile(id=READER_ID, user_id="reader", points=reader_points))
        session.save_book(
            Book(
                id=BOOK_ID,
                author_profile_id=AUTHOR_ID,
                name="The Long Serial",
                chapter_price=CHAPTER_PRICE,
                status="approved",
                created_at=created,
            )
        )
        for n in range(1, chapters + 1):
            chapter = Chapter(
                book_id=BOOK_ID, name=f"Chapter {n}", created_at=created + timedelta(days=n)
            )
            session.add_chapter(chapter)


def add_reader(store, profile_id: int, points: float) -> None:
    with store.transaction() as session:
        session.save_profile(Profile(id=profile_id, user_id=f"reader-{profile_id}", points=points))


def balance(store, profile_id: int) -> float:
    with store.transaction() as session:
        profile = session.get_profile(profile_id)
    assert profile is not None
    return profile.points
