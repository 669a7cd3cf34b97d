"""HTTP event source adapter - fetches raw collections with requests."""

import logging

import requests

from eventswiper.config import Config, load_config
from eventswiper.core.errors import NetworkError, ValidationError

logger = logging.getLogger(__name__)


class HttpEventSource:
    """
    Fetches the events and speakers collections over HTTP.

    Implements EventSource protocol. Connectivity problems raise NetworkError,
    bad responses raise ValidationError. No normalization - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _get_json(self, url: str) -> dict:
        """GET a URL and decode its JSON body."""
        logger.info(f"Fetching {url}")
        try:
            resp = self._session.get(url, timeout=self.config.request_timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise NetworkError(
                "Network error: Unable to connect to server. Check your internet connection."
            ) from e
        except requests.RequestException as e:
            raise ValidationError(f"Bad response from server: request failed ({e})") from e

        if not resp.ok:
            raise ValidationError(f"Bad response from server: HTTP {resp.status_code} {resp.reason}")

        try:
            return resp.json()
        except ValueError as e:
            raise ValidationError("Bad response from server: body is not valid JSON") from e

    def fetch_events(self) -> dict:
        """Fetch the raw events response."""
        return self._get_json(self.config.events_api)

    def fetch_speakers(self) -> dict:
        """Fetch the raw speakers response."""
        return self._get_json(self.config.speakers_api)
