from datetime import datetime, timedelta
from typing import Optional

from app.core import BlockConfig
from app.providers import CalendarEvent, CalendarGateway, CreateEventOptions
from app.schemas import BlockSummary, JobRunResult
from .base import BaseService
from .classifier import InterviewClassifier


class BlockCreator(BaseService):
    """Reserves scorecard time right after each upcoming interview.

    Only books a block when nothing else (ignoring all-day events) is in
    the slot. Re-running finds its own earlier block there, so repeated
    runs never double-book.
    """

    def __init__(self, gateway: CalendarGateway, config: BlockConfig, classifier: Optional[InterviewClassifier] = None):
        super().__init__(gateway, config)
        self.classifier = classifier or InterviewClassifier(config)
        self.block_duration = timedelta(minutes=config.block_duration_minutes)

    def has_space_after(self, event: CalendarEvent) -> bool:
        """True when [event.end, event.end + duration) holds no timed event."""
        block_ends = event.end + self.block_duration
        existing = self.gateway.query_events(event.end, block_ends)
        occupied = [evt for evt in existing if not evt.all_day]
        if occupied:
            self.logger.debug(
                f"Slot after '{event.title}' at {event.end.isoformat()} is taken by "
                f"{[evt.title for evt in occupied]}"
            )
        return not occupied

    def create_block_after(self, event: CalendarEvent) -> CalendarEvent:
        link = self.classifier.scorecard_link(event)
        block = self.gateway.create_event(
            self.config.block_title,
            event.end,
            event.end + self.block_duration,
            CreateEventOptions(location=link, description=self.config.provenance_marker),
        )
        self.logger.info(
            f"Created '{block.title}' {block.start.isoformat()}-{block.end.isoformat()} "
            f"after '{event.title}'" + (f" with scorecard {link}" if link else " (no scorecard link)")
        )
        return block

    def run(self, now: datetime) -> JobRunResult:
        now = self.require_aware(now)
        window_end = now + timedelta(days=self.config.lookahead_days)
        events = self.gateway.query_events(now, window_end)
        self.logger.info(f"Scanning {len(events)} events between {now.isoformat()} and {window_end.isoformat()}")

        result = JobRunResult(
            job="block-creator",
            ran_at=now,
            window_start=now,
            window_end=window_end,
            scanned=len(events),
        )
        for event in events:
            signals = self.classifier.matched_signals(event)
            if not signals:
                continue
            result.interviews += 1
            self.logger.debug(f"Interview detected: '{event.title}' via {', '.join(signals)}")

            if not self.has_space_after(event):
                result.skipped_occupied += 1
                continue

            block = self.create_block_after(event)
            result.created.append(
                BlockSummary(id=block.id, title=block.title, start=block.start, end=block.end, location=block.location)
            )

        self.logger.info(
            f"Block creator finished: {result.interviews} interviews, "
            f"{len(result.created)} blocks created, {result.skipped_occupied} slots occupied"
        )
        return result
