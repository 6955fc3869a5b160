from .calendar import CalendarEvent, Guest, CreateEventOptions, CalendarGateway, InMemoryCalendarProvider
from .google import GoogleCalendarProvider, GoogleOAuthClient

__all__ = [
    "CalendarEvent",
    "Guest",
    "CreateEventOptions",
    "CalendarGateway",
    "InMemoryCalendarProvider",
    "GoogleCalendarProvider",
    "GoogleOAuthClient",
]
