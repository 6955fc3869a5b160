from datetime import datetime
from typing import Any, Dict, Iterator

from fastapi import APIRouter, Depends

from app.core import settings, BlockConfig
from app.providers import CalendarGateway
from app.schemas import JobRunResult
from app.services import run_block_creator, run_block_reclaimer, build_gateway, utcnow
from app.api.v1.auth import require_scheduler


router = APIRouter()


def get_calendar_gateway() -> Iterator[CalendarGateway]:
    """Dependency to get the configured calendar gateway."""
    gateway = build_gateway(settings)
    try:
        yield gateway
    finally:
        gateway.close()


def get_block_config() -> BlockConfig:
    return settings.blocks


def get_now() -> datetime:
    return utcnow()


@router.post("/block-creator", response_model=JobRunResult)
def trigger_block_creator(
    _: Dict[str, Any] = Depends(require_scheduler),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    config: BlockConfig = Depends(get_block_config),
    now: datetime = Depends(get_now),
):
    """Book scorecard blocks after upcoming interviews."""
    return run_block_creator(gateway, now, config)


@router.post("/block-reclaimer", response_model=JobRunResult)
def trigger_block_reclaimer(
    _: Dict[str, Any] = Depends(require_scheduler),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
    config: BlockConfig = Depends(get_block_config),
    now: datetime = Depends(get_now),
):
    """Delete generated blocks that are safely in the past."""
    return run_block_reclaimer(gateway, now, config)
