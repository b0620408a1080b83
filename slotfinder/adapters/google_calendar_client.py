"""
Google Calendar API client for fetching a host's busy intervals.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarAuthenticationError, SourceUnavailable
from ..domain.models import BusyInterval

logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """
    Client for the Google Calendar v3 API.

    Uses the ``events.list`` endpoint with recurring events expanded into
    single instances. Obtaining and refreshing the OAuth access token is the
    caller's responsibility.
    """

    API_ENDPOINT = "https://www.googleapis.com/calendar/v3"
    MAX_RESULTS = 2500

    def __init__(
        self,
        access_token: str,
        calendar_ids: Optional[Mapping[str, str]] = None,
        default_calendar_id: str = "primary",
        timeout: int = 30,
    ):
        """
        Initialize the Google Calendar client.

        Args:
            access_token: Valid OAuth access token with calendar read scope
            calendar_ids: Optional mapping of host id -> calendar id
            default_calendar_id: Calendar used for hosts without a mapping
            timeout: Per-request timeout in seconds
        """
        self.access_token = access_token
        self.calendar_ids = dict(calendar_ids or {})
        self.default_calendar_id = default_calendar_id
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

    async def get_busy_intervals(
        self,
        host_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[BusyInterval]:
        """
        Fetch busy intervals for a host between ``start`` and ``end``.

        Raises:
            CalendarAuthenticationError: If the token is rejected
            SourceUnavailable: On network failure or an unusable response
        """
        calendar_id = self.calendar_ids.get(host_id, self.default_calendar_id)
        return await asyncio.to_thread(self.list_busy_intervals, calendar_id, start, end)

    def list_busy_intervals(
        self,
        calendar_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[BusyInterval]:
        """Blocking variant of ``get_busy_intervals`` for a calendar id."""
        busy: List[BusyInterval] = []
        page_token: Optional[str] = None

        while True:
            data = self._fetch_page(calendar_id, start, end, page_token)
            busy.extend(self._parse_events_response(data))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.debug("Fetched %d busy intervals from calendar %s", len(busy), calendar_id)
        return busy

    def _fetch_page(
        self,
        calendar_id: str,
        start: DateTime,
        end: DateTime,
        page_token: Optional[str],
    ) -> Dict[str, Any]:
        url = f"{self.API_ENDPOINT}/calendars/{quote(calendar_id, safe='')}/events"

        params: Dict[str, Any] = {
            "timeMin": start.in_timezone("UTC").to_iso8601_string(),
            "timeMax": end.in_timezone("UTC").to_iso8601_string(),
            "singleEvents": "true",
            "orderBy": "startTime",
            "eventTypes": "default",
            "maxResults": self.MAX_RESULTS,
        }
        if page_token:
            params["pageToken"] = page_token

        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SourceUnavailable(f"Failed to fetch calendar events: {e}") from e

        if response.status_code in (401, 403):
            raise CalendarAuthenticationError(
                f"Google Calendar rejected the access token (HTTP {response.status_code})"
            )

        try:
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise SourceUnavailable(f"Failed to fetch calendar events: {e}") from e
        except ValueError as e:
            raise SourceUnavailable(f"Calendar response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SourceUnavailable("Calendar response has an unexpected shape")

        return data

    def _parse_events_response(self, response_data: Dict[str, Any]) -> List[BusyInterval]:
        """
        Parse an ``events.list`` page into busy intervals.

        Response format:
        {
            "timeZone": "Europe/Berlin",
            "items": [
                {"status": "confirmed",
                 "start": {"dateTime": "2024-11-25T10:00:00+01:00"},
                 "end": {"dateTime": "2024-11-25T11:00:00+01:00"}},
                {"start": {"date": "2024-11-26"}, "end": {"date": "2024-11-27"}}
            ],
            "nextPageToken": "..."
        }
        """
        timezone = response_data.get("timeZone") or "UTC"
        busy: List[BusyInterval] = []

        for item in response_data.get("items", []):
            if item.get("status") == "cancelled":
                continue
            if item.get("transparency") == "transparent":
                # Marked "show as available"
                continue

            try:
                interval = self._parse_event(item, timezone)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Could not parse calendar event %s: %s", item.get("id", "?"), e)
                continue

            if interval is None:
                logger.warning("Skipping calendar event %s without time data", item.get("id", "?"))
                continue

            busy.append(interval)

        return busy

    @staticmethod
    def _parse_event(item: Dict[str, Any], timezone: str) -> BusyInterval | None:
        start = item.get("start") or {}
        end = item.get("end") or {}

        # All-day events block from the start of the first day to the end of the end date
        if start.get("date") and end.get("date"):
            return BusyInterval(
                start=pendulum.parse(start["date"], tz=timezone).start_of("day").in_timezone("UTC"),
                end=pendulum.parse(end["date"], tz=timezone).end_of("day").in_timezone("UTC"),
            )

        if start.get("dateTime") and end.get("dateTime"):
            return BusyInterval(
                start=_parse_instant(start["dateTime"]),
                end=_parse_instant(end["dateTime"]),
            )

        return None


def _parse_instant(value: str) -> DateTime:
    parsed = pendulum.parse(value)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Could not parse datetime: {value}")
    return parsed.in_timezone("UTC")
