import re
from typing import List

from app.core import BlockConfig
from app.providers import CalendarEvent


class InterviewClassifier:
    """Decides whether an event is an interview and finds its scorecard link.

    Each heuristic is a list of substrings taken from config; any single
    match is enough.
    """

    def __init__(self, config: BlockConfig):
        self.config = config
        self.link_re = re.compile(config.scorecard_link_pattern)

    def matched_signals(self, event: CalendarEvent) -> List[str]:
        """Names of the heuristics that fired for this event."""
        signals = []
        title = event.title or ""
        description = event.description or ""

        if any(trigger in title for trigger in self.config.title_triggers):
            signals.append("title")
        if any(trigger in description for trigger in self.config.description_triggers):
            signals.append("description")
        if any(
            trigger in (guest.name or "")
            for guest in event.guests
            for trigger in self.config.guest_name_triggers
        ):
            signals.append("guest")
        return signals

    def is_interview(self, event: CalendarEvent) -> bool:
        return bool(self.matched_signals(event))

    def scorecard_link(self, event: CalendarEvent) -> str:
        match = self.link_re.search(event.description or "")
        return match.group(0) if match else ""
