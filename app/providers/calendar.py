from typing import Protocol, List, Optional, Dict
from datetime import datetime
import uuid

from pydantic import BaseModel, Field, field_validator

from app.exceptions import EventNotFoundError, ValidationError


class Guest(BaseModel):
    name: str = ""
    email: Optional[str] = None


class CalendarEvent(BaseModel):
    """A calendar event as seen by the jobs. Owned by the calendar service."""

    id: str = Field(default_factory=lambda: f"event_{uuid.uuid4().hex}")
    title: str = ""
    description: str = ""
    start: datetime
    end: datetime
    all_day: bool = False
    guests: List[Guest] = []
    location: str = ""

    @field_validator("title", "description", "location", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        # Providers may omit text fields entirely
        return value if value is not None else ""

    @field_validator("start", "end")
    @classmethod
    def _timezone_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("must be timezone-aware")
        return value

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open overlap with [start, end)."""
        return self.start < end and self.end > start


class CreateEventOptions(BaseModel):
    location: str = ""
    description: str = ""


class CalendarGateway(Protocol):
    def query_events(self, start: datetime, end: datetime) -> List[CalendarEvent]: ...
    def create_event(self, title: str, start: datetime, end: datetime, options: CreateEventOptions) -> CalendarEvent: ...
    def delete_event(self, event: CalendarEvent) -> None: ...


class InMemoryCalendarProvider:
    """List-backed calendar used by tests and local dry runs."""

    def __init__(self, events: Optional[List[CalendarEvent]] = None):
        self._events: Dict[str, CalendarEvent] = {}
        self.created: List[CalendarEvent] = []
        self.deleted: List[CalendarEvent] = []
        for event in events or []:
            self.add(event)

    def add(self, event: CalendarEvent) -> CalendarEvent:
        self._events[event.id] = event
        return event

    @property
    def events(self) -> List[CalendarEvent]:
        return sorted(self._events.values(), key=lambda e: (e.start, e.end))

    def query_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        return [event for event in self.events if event.overlaps(start, end)]

    def create_event(self, title: str, start: datetime, end: datetime, options: CreateEventOptions) -> CalendarEvent:
        if end <= start:
            raise ValidationError("Event end must be after its start", {"start": start.isoformat(), "end": end.isoformat()})
        event = CalendarEvent(
            title=title,
            description=options.description,
            location=options.location,
            start=start,
            end=end,
        )
        self.created.append(event)
        return self.add(event)

    def delete_event(self, event: CalendarEvent) -> None:
        if event.id not in self._events:
            raise EventNotFoundError(event.id)
        self.deleted.append(self._events.pop(event.id))

    def close(self) -> None:
        return None
