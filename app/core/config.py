from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List
import os
import re


DEFAULT_BLOCK_TITLE = "Fill out interview scorecard"
DEFAULT_PROVENANCE_MARKER = "Generated with https://github.com/streeter/google-apps-scripts"


def _split_list(value: Optional[str], default: List[str]) -> List[str]:
    """Parse a comma separated env value, falling back to the default list."""
    if not value:
        return list(default)
    items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


class BlockConfig(BaseModel):
    """Rules shared by the block creator and the block reclaimer."""

    # Creator
    block_duration_minutes: int = 15
    lookahead_days: int = 14
    title_triggers: List[str] = ["Team Screen"]
    description_triggers: List[str] = ["Thanks for interviewing"]
    guest_name_triggers: List[str] = ["GoodTime Sync"]
    block_title: str = DEFAULT_BLOCK_TITLE
    provenance_marker: str = DEFAULT_PROVENANCE_MARKER
    scorecard_link_pattern: str = r'https://app\.greenhouse\.io/guides/[^"]+'

    # Reclaimer
    reclaimable_titles: List[str] = ["Busy", DEFAULT_BLOCK_TITLE]
    reclaim_lookback_hours: int = 24
    reclaim_guard_minutes: int = 60

    @field_validator("block_duration_minutes", "lookahead_days", "reclaim_lookback_hours", "reclaim_guard_minutes")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number")
        return value

    @field_validator("block_title", "provenance_marker")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("title_triggers", "description_triggers", "guest_name_triggers", "reclaimable_titles")
    @classmethod
    def _no_blank_items(cls, value: List[str]) -> List[str]:
        # "" is a substring of every string
        if any(not item or not item.strip() for item in value):
            raise ValueError("must not contain empty entries")
        return value

    @field_validator("scorecard_link_pattern")
    @classmethod
    def _compilable(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}")
        return value

    @model_validator(mode="after")
    def _guard_inside_lookback(self) -> "BlockConfig":
        if self.reclaim_guard_minutes >= self.reclaim_lookback_hours * 60:
            raise ValueError("reclaim_guard_minutes must be shorter than reclaim_lookback_hours")
        return self

    @classmethod
    def from_env(cls) -> "BlockConfig":
        """Load block rules from environment variables."""
        defaults = cls()
        return cls(
            block_duration_minutes=int(os.getenv("BLOCK_DURATION_MINUTES", defaults.block_duration_minutes)),
            lookahead_days=int(os.getenv("BLOCK_LOOKAHEAD_DAYS", defaults.lookahead_days)),
            title_triggers=_split_list(os.getenv("INTERVIEW_TITLE_TRIGGERS"), defaults.title_triggers),
            description_triggers=_split_list(os.getenv("INTERVIEW_DESCRIPTION_TRIGGERS"), defaults.description_triggers),
            guest_name_triggers=_split_list(os.getenv("INTERVIEW_GUEST_TRIGGERS"), defaults.guest_name_triggers),
            block_title=os.getenv("BLOCK_TITLE", defaults.block_title),
            provenance_marker=os.getenv("BLOCK_PROVENANCE_MARKER", defaults.provenance_marker),
            scorecard_link_pattern=os.getenv("SCORECARD_LINK_PATTERN", defaults.scorecard_link_pattern),
            reclaimable_titles=_split_list(os.getenv("RECLAIMABLE_TITLES"), defaults.reclaimable_titles),
            reclaim_lookback_hours=int(os.getenv("RECLAIM_LOOKBACK_HOURS", defaults.reclaim_lookback_hours)),
            reclaim_guard_minutes=int(os.getenv("RECLAIM_GUARD_MINUTES", defaults.reclaim_guard_minutes)),
        )


class Settings(BaseModel):
    """Application settings and configuration."""

    # API
    api_title: str = "Interview Scorecard Blocks"
    api_version: str = "0.1.0"
    api_description: str = "Scheduled jobs that reserve and reclaim interview scorecard time on a calendar"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Environment
    environment: str = "development"

    # Google Calendar
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_calendar_id: str = "primary"
    calendar_http_timeout: float = 30.0

    # Scheduler authentication
    scheduler_jwt_secret: Optional[str] = None

    # Job rules
    blocks: BlockConfig = BlockConfig()

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        from dotenv import load_dotenv

        # Load .env.local first, then .env (if they exist)
        load_dotenv(".env.local", override=True)
        load_dotenv(".env", override=False)

        return cls(
            api_title=os.getenv("API_TITLE", "Interview Scorecard Blocks"),
            api_version=os.getenv("API_VERSION", "0.1.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            environment=os.getenv("ENVIRONMENT", "development"),
            google_client_id=os.getenv("GOOGLE_CLIENT_ID"),
            google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
            google_refresh_token=os.getenv("GOOGLE_REFRESH_TOKEN"),
            google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary"),
            calendar_http_timeout=float(os.getenv("CALENDAR_HTTP_TIMEOUT", "30")),
            scheduler_jwt_secret=os.getenv("SCHEDULER_JWT_SECRET") or None,
            blocks=BlockConfig.from_env(),
        )

    @property
    def google_configured(self) -> bool:
        return all([self.google_client_id, self.google_client_secret, self.google_refresh_token])


# Global settings instance
settings = Settings.from_env()
