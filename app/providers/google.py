"""Google Calendar gateway over the REST v3 API."""
from typing import Any, Dict, List, Optional
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from urllib.parse import quote

import httpx

from app.core import get_logger
from app.exceptions import ConfigurationError, EventNotFoundError, GatewayError
from .calendar import CalendarEvent, CreateEventOptions, Guest

logger = get_logger(__name__)

GOOGLE_OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_API_BASE_URL = "https://www.googleapis.com/calendar/v3"
MAX_PAGE_SIZE = 250


def to_rfc3339(value: datetime) -> str:
    normalized = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    return normalized.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_datetime(value: str) -> datetime:
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = f"{normalized[:-1]}+00:00"
    parsed = datetime.fromisoformat(normalized)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)


def _coerce_zoneinfo(name: Optional[str]) -> tzinfo:
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone '{name}', using UTC")
        return timezone.utc


def _parse_boundary(payload: Dict[str, Any], fallback_timezone: Optional[str] = None) -> tuple[datetime, bool]:
    """Return (moment, is_all_day) for an event start/end object.

    All-day dates start at local midnight in the event's (or calendar's) time zone.
    """
    date_time = payload.get("dateTime")
    if isinstance(date_time, str) and date_time.strip():
        return _parse_datetime(date_time), False

    date_value = payload.get("date")
    if isinstance(date_value, str) and date_value.strip():
        day = date.fromisoformat(date_value.strip())
        zone = _coerce_zoneinfo(payload.get("timeZone") or fallback_timezone)
        return datetime(day.year, day.month, day.day, tzinfo=zone), True

    raise ValueError("Google Calendar event is missing start/end dateTime or date values")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.reason_phrase


def google_event_to_calendar_event(item: Dict[str, Any], calendar_timezone: Optional[str] = None) -> Optional[CalendarEvent]:
    """Map a Google Calendar event resource; cancelled or malformed items map to None."""
    if item.get("status") == "cancelled":
        return None
    try:
        start, all_day = _parse_boundary(item.get("start") or {}, calendar_timezone)
        end, _ = _parse_boundary(item.get("end") or {}, calendar_timezone)
    except ValueError as e:
        logger.warning(f"Skipping event {item.get('id')}: {e}")
        return None

    guests = []
    for attendee in item.get("attendees") or []:
        if not isinstance(attendee, dict):
            continue
        guests.append(Guest(name=attendee.get("displayName") or "", email=attendee.get("email")))

    return CalendarEvent(
        id=item.get("id") or "",
        title=item.get("summary"),
        description=item.get("description"),
        location=item.get("location"),
        start=start,
        end=end,
        all_day=all_day,
        guests=guests,
    )


class GoogleOAuthClient:
    """Refresh-token OAuth helper with access-token caching."""

    def __init__(self, client_id: str, client_secret: str, refresh_token: str, http_client: httpx.Client):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.http_client = http_client
        self._access_token: Optional[str] = None
        self._expires_at: Optional[datetime] = None

    def get_access_token(self, force_refresh: bool = False) -> str:
        if not force_refresh and self._token_is_fresh():
            return self._access_token
        self._refresh_access_token()
        return self._access_token

    def _token_is_fresh(self) -> bool:
        if self._access_token is None or self._expires_at is None:
            return False
        return datetime.now(timezone.utc) < self._expires_at

    def _refresh_access_token(self) -> None:
        try:
            response = self.http_client.post(
                GOOGLE_OAUTH_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                "Google OAuth token refresh failed",
                {"status_code": e.response.status_code, "reason": _error_message(e.response)}
            )
        except (httpx.HTTPError, ValueError) as e:
            raise GatewayError(f"Google OAuth token refresh failed: {e}")

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise GatewayError("Google OAuth token response is missing an access_token")

        try:
            expires_in = int(payload.get("expires_in") or 3600)
        except (TypeError, ValueError):
            raise GatewayError("Google OAuth token response has an unreadable expires_in")
        # Refresh a minute early
        self._access_token = access_token
        self._expires_at = datetime.now(timezone.utc) + timedelta(seconds=max(expires_in - 60, 30))
        logger.debug("Refreshed Google access token")


class GoogleCalendarProvider:
    """CalendarGateway backed by a single Google calendar."""

    def __init__(
        self,
        oauth: GoogleOAuthClient,
        http_client: httpx.Client,
        calendar_id: str = "primary",
    ):
        self.oauth = oauth
        self.http_client = http_client
        self.calendar_id = calendar_id
        self.events_path = f"/calendars/{quote(calendar_id, safe='')}/events"

    @classmethod
    def from_settings(cls, settings, http_client: Optional[httpx.Client] = None) -> "GoogleCalendarProvider":
        if not settings.google_configured:
            raise ConfigurationError(
                "Google Calendar is not configured",
                {"required": ["GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REFRESH_TOKEN"]}
            )
        http_client = http_client or httpx.Client(timeout=settings.calendar_http_timeout)
        oauth = GoogleOAuthClient(
            settings.google_client_id,
            settings.google_client_secret,
            settings.google_refresh_token,
            http_client,
        )
        return cls(oauth, http_client, calendar_id=settings.google_calendar_id)

    def close(self) -> None:
        self.http_client.close()

    def _request(self, method: str, path: str, params: Optional[dict] = None, json_body: Optional[dict] = None) -> httpx.Response:
        url = f"{GOOGLE_CALENDAR_API_BASE_URL}{path}"
        response = self._send(method, url, params, json_body, force_refresh=False)
        if response.status_code == 401:
            response = self._send(method, url, params, json_body, force_refresh=True)
        return response

    def _send(self, method, url, params, json_body, force_refresh: bool) -> httpx.Response:
        token = self.oauth.get_access_token(force_refresh=force_refresh)
        try:
            return self.http_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"Google Calendar request failed: {e}", {"method": method, "url": url})

    def _json(self, response: httpx.Response, operation: str) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            raise GatewayError(
                f"Google Calendar {operation} returned an unreadable body",
                {"status_code": response.status_code, "body": response.text[:200]}
            )
        if not isinstance(payload, dict):
            raise GatewayError(f"Google Calendar {operation} returned an unexpected payload")
        return payload

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        if 200 <= response.status_code < 300:
            return
        raise GatewayError(
            f"Google Calendar {operation} failed",
            {"status_code": response.status_code, "reason": _error_message(response)}
        )

    def query_events(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        """List every event overlapping [start, end), following pagination."""
        params: Dict[str, Any] = {
            "timeMin": to_rfc3339(start),
            "timeMax": to_rfc3339(end),
            "singleEvents": "true",
            "showDeleted": "false",
            "orderBy": "startTime",
            "maxResults": MAX_PAGE_SIZE,
        }
        events: List[CalendarEvent] = []
        while True:
            response = self._request("GET", self.events_path, params=params)
            self._raise_for_status(response, "list events")
            payload = self._json(response, "list events")
            for item in payload.get("items") or []:
                event = google_event_to_calendar_event(item, payload.get("timeZone"))
                if event is not None:
                    events.append(event)

            page_token = payload.get("nextPageToken")
            if not page_token:
                break
            params = {**params, "pageToken": page_token}

        logger.debug(f"Fetched {len(events)} events between {to_rfc3339(start)} and {to_rfc3339(end)}")
        return events

    def create_event(self, title: str, start: datetime, end: datetime, options: CreateEventOptions) -> CalendarEvent:
        body: Dict[str, Any] = {
            "summary": title,
            "start": {"dateTime": to_rfc3339(start)},
            "end": {"dateTime": to_rfc3339(end)},
        }
        if options.location:
            body["location"] = options.location
        if options.description:
            body["description"] = options.description

        response = self._request("POST", self.events_path, json_body=body)
        self._raise_for_status(response, "create event")
        event = google_event_to_calendar_event(self._json(response, "create event"))
        if event is None:
            raise GatewayError("Google Calendar returned an unusable event after create")
        return event

    def delete_event(self, event: CalendarEvent) -> None:
        response = self._request("DELETE", f"{self.events_path}/{quote(event.id, safe='')}")
        # 410 Gone is what Google returns for an event that was already deleted
        if response.status_code in (404, 410):
            raise EventNotFoundError(event.id)
        self._raise_for_status(response, "delete event")
