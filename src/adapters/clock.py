from datetime import UTC, date, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return self.now_utc().date()


class FixedClock:
    """Deterministic clock for tests and replays."""

    def __init__(self, now: datetime) -> None:
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        self._now = now

    def now_utc(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def advance(self, seconds: float = 0, days: int = 0) -> datetime:
        self._now = self._now + timedelta(seconds=seconds, days=days)
        return self._now
