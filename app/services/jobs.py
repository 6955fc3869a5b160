"""Entry points invoked by the external scheduler (HTTP route or CLI)."""
from datetime import datetime, timezone
from typing import Optional

from app.core import BlockConfig, Settings, get_logger
from app.providers import CalendarGateway, GoogleCalendarProvider
from app.schemas import JobRunResult
from .block_creator import BlockCreator
from .block_reclaimer import BlockReclaimer

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def run_block_creator(gateway: CalendarGateway, now: datetime, config: Optional[BlockConfig] = None) -> JobRunResult:
    return BlockCreator(gateway, config or BlockConfig()).run(now)


def run_block_reclaimer(gateway: CalendarGateway, now: datetime, config: Optional[BlockConfig] = None) -> JobRunResult:
    return BlockReclaimer(gateway, config or BlockConfig()).run(now)


def build_gateway(settings: Settings) -> GoogleCalendarProvider:
    logger.debug(f"Using Google calendar '{settings.google_calendar_id}'")
    return GoogleCalendarProvider.from_settings(settings)
