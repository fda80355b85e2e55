"""Agenda backend API adapter - HTTP client for events and activities."""

import logging
from typing import Callable, TypeVar

import requests

from agenda.config import Config, load_config
from agenda.core.activities import Activity
from agenda.core.disciplines import Discipline
from agenda.core.events import EventTemplate

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """Raised when the backend cannot be reached or answers with an error."""

    pass


class AgendaApiClient:
    """
    Agenda backend API adapter.

    Implements EventRepository, ActivityRepository and DisciplineCatalog.
    No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        if not self.config.api_base_url:
            raise ApiError("No API base URL. Set API_BASE_URL in agenda.conf.")
        self.base_url = self.config.api_base_url.rstrip("/")
        self._session = session or requests.Session()
        if self.config.api_token:
            self._session.headers["Authorization"] = f"Bearer {self.config.api_token}"

    def _request(self, method: str, endpoint: str, **kwargs) -> dict | list | None:
        """Make an API request and decode the JSON body."""
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self._session.request(method, url, timeout=DEFAULT_TIMEOUT, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e

        if not resp.ok:
            raise ApiError(f"{method} {url} returned {resp.status_code}: {resp.text}")
        if not resp.content:
            return None
        return resp.json()

    def _fetch_list(self, endpoint: str, parse: Callable[[dict], T]) -> list[T]:
        data = self._request("GET", endpoint) or []
        if isinstance(data, dict):
            data = data.get("items", [])
        items = []
        for record in data:
            try:
                items.append(parse(record))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed record from {endpoint}: {e!r}")
        return items

    def fetch_templates(self) -> list[EventTemplate]:
        return self._fetch_list("/events", EventTemplate.from_api)

    def fetch_all(self) -> list[Activity]:
        return self._fetch_list("/activities", Activity.from_api)

    def fetch_disciplines(self) -> list[Discipline]:
        return self._fetch_list("/disciplines", Discipline.from_api)

    def save(self, activity: Activity) -> None:
        self._request("PUT", f"/activities/{activity.id}", json=activity.to_api())

    def delete(self, activity_id: str) -> None:
        self._request("DELETE", f"/activities/{activity_id}")
