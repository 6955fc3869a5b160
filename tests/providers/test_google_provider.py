import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from app.core import Settings
from app.exceptions import ConfigurationError, EventNotFoundError, GatewayError
from app.providers import CalendarEvent, CreateEventOptions, GoogleCalendarProvider
from app.providers.google import google_event_to_calendar_event, to_rfc3339

EVENTS_PATH = "/calendar/v3/calendars/primary/events"


def google_settings(**overrides):
    values = {
        "google_client_id": "client-id",
        "google_client_secret": "client-secret",
        "google_refresh_token": "refresh-token",
    }
    values.update(overrides)
    return Settings(**values)


class FakeGoogle:
    """Records requests and serves canned Google responses."""

    def __init__(self):
        self.requests = []
        self.token_calls = 0
        self.pages = [{"items": []}]
        self.delete_status = 204
        self.fail_status = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "oauth2.googleapis.com":
            self.token_calls += 1
            return httpx.Response(200, json={"access_token": f"token-{self.token_calls}", "expires_in": 3600})

        if self.fail_status:
            return httpx.Response(self.fail_status, json={"error": {"message": "backend unavailable"}})

        if request.method == "GET":
            page = int(request.url.params.get("pageToken", "0"))
            return httpx.Response(200, json=self.pages[page])
        if request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "created-1", **body})
        if request.method == "DELETE":
            return httpx.Response(self.delete_status)
        return httpx.Response(405)


@pytest.fixture
def fake_google():
    return FakeGoogle()


@pytest.fixture
def provider(fake_google):
    client = httpx.Client(transport=httpx.MockTransport(fake_google))
    return GoogleCalendarProvider.from_settings(google_settings(), http_client=client)


def api_requests(fake_google):
    return [r for r in fake_google.requests if r.url.host == "www.googleapis.com"]


class TestGoogleEventMapping:
    def test_timed_event(self):
        event = google_event_to_calendar_event({
            "id": "abc",
            "summary": "Team Screen w/ Jane",
            "start": {"dateTime": "2026-10-18T13:00:00-07:00"},
            "end": {"dateTime": "2026-10-18T14:00:00-07:00"},
            "attendees": [{"email": "sync@goodtime.io", "displayName": "GoodTime Sync"}, {"email": "me@example.com"}],
        })

        assert event.id == "abc"
        assert event.title == "Team Screen w/ Jane"
        assert event.description == ""
        assert event.all_day is False
        assert event.end - event.start == timedelta(hours=1)
        assert [g.name for g in event.guests] == ["GoodTime Sync", ""]

    def test_all_day_event(self):
        event = google_event_to_calendar_event({
            "id": "holiday",
            "summary": "Holiday",
            "start": {"date": "2026-10-19"},
            "end": {"date": "2026-10-20"},
        })

        assert event.all_day is True
        assert event.start == datetime(2026, 10, 19, tzinfo=timezone.utc)

    def test_cancelled_and_malformed_events_dropped(self):
        assert google_event_to_calendar_event({"id": "x", "status": "cancelled"}) is None
        assert google_event_to_calendar_event({"id": "y", "start": {}, "end": {}}) is None

    def test_rfc3339_is_utc(self):
        moment = datetime(2026, 10, 18, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_rfc3339(moment) == "2026-10-18T10:00:00Z"


class TestGoogleCalendarProvider:
    def test_requires_credentials(self):
        with pytest.raises(ConfigurationError):
            GoogleCalendarProvider.from_settings(Settings())

    def test_query_follows_pagination(self, provider, fake_google, now):
        fake_google.pages = [
            {"items": [{"id": "1", "summary": "A", "start": {"dateTime": "2026-10-18T13:00:00Z"}, "end": {"dateTime": "2026-10-18T14:00:00Z"}}],
             "nextPageToken": "1"},
            {"items": [{"id": "2", "summary": "B", "description": "Thanks for interviewing",
                        "start": {"dateTime": "2026-10-18T15:00:00Z"}, "end": {"dateTime": "2026-10-18T16:00:00Z"}}]},
        ]

        events = provider.query_events(now, now + timedelta(days=14))

        assert [e.id for e in events] == ["1", "2"]
        calls = api_requests(fake_google)
        assert len(calls) == 2
        assert calls[0].url.path == EVENTS_PATH
        assert calls[0].url.params["timeMin"] == "2026-10-18T12:00:00Z"
        assert calls[0].url.params["singleEvents"] == "true"
        assert calls[1].url.params["pageToken"] == "1"
        assert calls[0].headers["Authorization"] == "Bearer token-1"
        # Token is cached between requests
        assert fake_google.token_calls == 1

    def test_create_sends_location_and_marker(self, provider, fake_google, now):
        event = provider.create_event(
            "Fill out interview scorecard",
            now,
            now + timedelta(minutes=15),
            CreateEventOptions(location="https://app.greenhouse.io/guides/abc123", description="Generated with marker"),
        )

        body = json.loads(api_requests(fake_google)[0].content)
        assert body["summary"] == "Fill out interview scorecard"
        assert body["location"] == "https://app.greenhouse.io/guides/abc123"
        assert body["description"] == "Generated with marker"
        assert body["start"] == {"dateTime": "2026-10-18T12:00:00Z"}
        assert event.id == "created-1"
        assert event.location == "https://app.greenhouse.io/guides/abc123"

    def test_create_omits_empty_location(self, provider, fake_google, now):
        provider.create_event("Block", now, now + timedelta(minutes=15), CreateEventOptions())

        body = json.loads(api_requests(fake_google)[0].content)
        assert "location" not in body
        assert "description" not in body

    def test_delete(self, provider, fake_google, now):
        provider.delete_event(CalendarEvent(id="evt/1", start=now, end=now))

        call = api_requests(fake_google)[0]
        assert call.method == "DELETE"
        assert call.url.raw_path.decode().endswith("/events/evt%2F1")

    @pytest.mark.parametrize("status", [404, 410])
    def test_delete_missing_event(self, provider, fake_google, now, status):
        fake_google.delete_status = status

        with pytest.raises(EventNotFoundError):
            provider.delete_event(CalendarEvent(id="gone", start=now, end=now))

    def test_server_error_is_gateway_error(self, provider, fake_google, now):
        fake_google.fail_status = 503

        with pytest.raises(GatewayError) as exc_info:
            provider.query_events(now, now + timedelta(hours=1))

        assert exc_info.value.details["status_code"] == 503
        assert exc_info.value.details["reason"] == "backend unavailable"

    def test_unauthorized_refreshes_token_once(self, provider, fake_google, now):
        fake_google.fail_status = 401

        with pytest.raises(GatewayError):
            provider.query_events(now, now + timedelta(hours=1))

        assert fake_google.token_calls == 2
        assert len(api_requests(fake_google)) == 2

    def test_transport_error_is_gateway_error(self, now):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        provider = GoogleCalendarProvider.from_settings(google_settings(), http_client=client)

        with pytest.raises(GatewayError):
            provider.query_events(now, now + timedelta(hours=1))

    @pytest.mark.parametrize("operation", ["query", "create"])
    def test_unreadable_body_is_gateway_error(self, now, operation):
        def handler(request):
            if request.url.host == "oauth2.googleapis.com":
                return httpx.Response(200, json={"access_token": "token", "expires_in": 3600})
            return httpx.Response(200, text="<html>proxy error</html>")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        provider = GoogleCalendarProvider.from_settings(google_settings(), http_client=client)

        with pytest.raises(GatewayError) as exc_info:
            if operation == "query":
                provider.query_events(now, now + timedelta(hours=1))
            else:
                provider.create_event("Fill out interview scorecard", now, now + timedelta(minutes=15), CreateEventOptions())

        assert exc_info.value.details["status_code"] == 200

    def test_unreadable_token_expiry_is_gateway_error(self, now):
        def handler(request):
            return httpx.Response(200, json={"access_token": "token", "expires_in": "soon"})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        provider = GoogleCalendarProvider.from_settings(google_settings(), http_client=client)

        with pytest.raises(GatewayError):
            provider.query_events(now, now + timedelta(hours=1))

    def test_all_day_event_uses_calendar_timezone(self, provider, fake_google, now):
        fake_google.pages = [{
            "timeZone": "America/Los_Angeles",
            "items": [{
                "id": "offsite",
                "summary": "Team offsite",
                "start": {"date": "2026-10-18"},
                "end": {"date": "2026-10-19"},
            }],
        }]

        [event] = provider.query_events(now, now + timedelta(days=1))

        assert event.all_day is True
        # Midnight Pacific daylight time
        assert event.start.utcoffset() == timedelta(hours=-7)
        assert event.start == datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)
        assert event.end - event.start == timedelta(days=1)
