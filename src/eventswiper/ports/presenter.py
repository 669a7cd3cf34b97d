"""Presenter interface."""

from typing import Protocol

from eventswiper.core.events import Event


class Presenter(Protocol):
    """Interface the session controller reports its state through."""

    def on_event_shown(self, event: Event | None) -> None:
        """Show the current event, or the exhausted state when None."""
        ...

    def on_counters(self, selected_count: int, remaining_count: int) -> None:
        ...

    def on_undo_available(self, available: bool) -> None:
        ...

    def on_ingestion_error(self, message: str) -> None:
        """Report a failed ingestion to the user."""
        ...
