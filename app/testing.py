from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import FastAPI

from app.core import BlockConfig
from app.providers import InMemoryCalendarProvider


def configure_test_overrides(
    app: FastAPI,
    gateway: InMemoryCalendarProvider,
    now: datetime,
    config: Optional[BlockConfig] = None,
    bypass_auth: bool = True,
) -> None:
    """Point the job endpoints at an in-memory calendar and a frozen clock."""
    from app.api.v1.auth import require_scheduler
    from app.api.v1.jobs import get_block_config, get_calendar_gateway, get_now

    def override_get_calendar_gateway():
        yield gateway

    app.dependency_overrides[get_calendar_gateway] = override_get_calendar_gateway
    app.dependency_overrides[get_now] = lambda: now
    if config is not None:
        app.dependency_overrides[get_block_config] = lambda: config
    if bypass_auth:
        app.dependency_overrides[require_scheduler] = lambda: {"sub": "test"}


def clear_test_overrides(app: FastAPI) -> None:
    app.dependency_overrides.clear()
