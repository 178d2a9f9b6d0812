"""Time utilities for the domain layer."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone, tzinfo


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def today_utc() -> date:
    """Return current date in UTC (timezone-aware)."""
    return datetime.now(tz=timezone.utc).date()


def ensure_tz_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware (UTC if naive)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class Clock(ABC):
    """Source of "now" for a sync run."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current moment (timezone-aware)."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in the given zone (UTC by default)."""

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz or timezone.utc

    def now(self) -> datetime:
        return datetime.now(tz=self._tz)


class FixedClock(Clock):
    """Clock frozen at a single moment."""

    def __init__(self, moment: datetime | date):
        if not isinstance(moment, datetime):
            moment = datetime(moment.year, moment.month, moment.day)
        self._moment = ensure_tz_aware(moment)

    def now(self) -> datetime:
        return self._moment
