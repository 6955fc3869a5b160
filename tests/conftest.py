import os
import sys

# Job endpoints are open without a scheduler secret only in development
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.pop("SCHEDULER_JWT_SECRET", None)

# Ensure project root is on sys.path so `import app` works in all environments
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from app.core import BlockConfig  # noqa: E402
from app.providers import CalendarEvent, Guest, InMemoryCalendarProvider  # noqa: E402


@pytest.fixture
def now():
    """Fixed 'now' for deterministic windows."""
    return datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config():
    return BlockConfig()


@pytest.fixture
def gateway():
    return InMemoryCalendarProvider()


@pytest.fixture
def make_event():
    """Build calendar events from a start and a length in minutes."""
    def _make(title="Meeting", start=None, minutes=60, description="", guests=None, all_day=False, **kwargs):
        start = start or datetime(2026, 10, 18, 13, 0, tzinfo=timezone.utc)
        return CalendarEvent(
            title=title,
            description=description,
            start=start,
            end=start + timedelta(minutes=minutes),
            guests=[Guest(name=name) for name in (guests or [])],
            all_day=all_day,
            **kwargs
        )
    return _make
