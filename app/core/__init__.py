from .config import settings, Settings, BlockConfig
from .logging import setup_logging, get_logger

__all__ = [
    "settings",
    "Settings",
    "BlockConfig",
    "setup_logging",
    "get_logger",
]
