"""Event source interface."""

from typing import Protocol


class EventSource(Protocol):
    """Interface for fetching raw event and speaker collections."""

    def fetch_events(self) -> dict:
        """Fetch the raw events response. Records are under "entities"."""
        ...

    def fetch_speakers(self) -> dict:
        """Fetch the raw speakers response. Records are under "entities"."""
        ...
