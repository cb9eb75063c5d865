from datetime import UTC, date, datetime

from src.adapters.clock import FixedClock, SystemClock


def test_system_clock_is_utc():
    clock = SystemClock()
    now = clock.now_utc()
    assert now.tzinfo is not None
    diff = abs((datetime.now(UTC) - now).total_seconds())
    assert diff < 1.0


def test_system_clock_today():
    assert isinstance(SystemClock().today(), date)


def test_fixed_clock_treats_naive_as_utc():
    clock = FixedClock(datetime(2026, 1, 1, 23, 30))
    assert clock.now_utc().tzinfo == UTC
    assert clock.today() == date(2026, 1, 1)


def test_fixed_clock_advance():
    clock = FixedClock(datetime(2026, 1, 1, 23, 30, tzinfo=UTC))
    clock.advance(seconds=3600)
    assert clock.today() == date(2026, 1, 2)
    clock.advance(days=2)
    assert clock.now_utc() == datetime(2026, 1, 4, 0, 30, tzinfo=UTC)
