from abc import ABC
from datetime import datetime

from app.core import BlockConfig
from app.core.logging import get_logger
from app.exceptions import ValidationError
from app.providers import CalendarGateway


class BaseService(ABC):
    """Base class for calendar jobs: holds the gateway, the rules and a logger."""

    def __init__(self, gateway: CalendarGateway, config: BlockConfig):
        self.gateway = gateway
        self.config = config
        self.logger = get_logger(self.__class__.__name__)

    def require_aware(self, now: datetime) -> datetime:
        """Reject naive timestamps; calendar windows are absolute instants."""
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValidationError("'now' must be timezone-aware", {"now": now.isoformat()})
        return now
