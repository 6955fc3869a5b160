from datetime import datetime, timedelta

from app.core import BlockConfig
from app.exceptions import EventNotFoundError
from app.providers import CalendarEvent, CalendarGateway
from app.schemas import BlockSummary, JobRunResult
from .base import BaseService


class BlockReclaimer(BaseService):
    """Deletes generated blocks once they are safely in the past."""

    def __init__(self, gateway: CalendarGateway, config: BlockConfig):
        super().__init__(gateway, config)
        self.lookback = timedelta(hours=config.reclaim_lookback_hours)
        self.guard = timedelta(minutes=config.reclaim_guard_minutes)
        # The configured block title is always reclaimable
        self.titles = set(config.reclaimable_titles) | {config.block_title}

    def is_generated_block(self, event: CalendarEvent) -> bool:
        """Known title AND provenance marker; a matching title alone is never enough."""
        if event.title not in self.titles:
            return False
        return self.config.provenance_marker in (event.description or "")

    def run(self, now: datetime) -> JobRunResult:
        now = self.require_aware(now)
        window_start = now - self.lookback
        window_end = now - self.guard

        # The gateway returns overlaps; only events that *start* in the window count
        events = [
            event for event in self.gateway.query_events(window_start, window_end)
            if window_start <= event.start < window_end
        ]
        result = JobRunResult(
            job="block-reclaimer",
            ran_at=now,
            window_start=window_start,
            window_end=window_end,
            scanned=len(events),
        )

        for event in filter(self.is_generated_block, events):
            self.logger.info(f"Deleting {event.start.isoformat()}-{event.end.isoformat()} - {event.title}")
            try:
                self.gateway.delete_event(event)
            except EventNotFoundError:
                self.logger.info(f"Event {event.id} was already deleted")
                result.already_deleted += 1
                continue
            result.deleted.append(
                BlockSummary(id=event.id, title=event.title, start=event.start, end=event.end, location=event.location)
            )

        self.logger.info(
            f"Block reclaimer finished: {len(result.deleted)} deleted, "
            f"{result.already_deleted} already gone, {result.scanned} scanned"
        )
        return result
