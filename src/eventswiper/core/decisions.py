"""Decision store - durable record of triage outcomes.

Keeps the accepted event snapshots (in acceptance order), the set of
processed event IDs, the cursor, and the ingestion cache slots. Persistence
goes through a StateStore; storage failures are logged and recovered locally,
never raised to the caller.
"""

import json
import logging
from enum import Enum

from .errors import StorageError
from .events import Event
from eventswiper.ports.state_store import StateStore

logger = logging.getLogger(__name__)

SELECTIONS_KEY = "selections"
PROCESSED_KEY = "processed-ids"
CURSOR_KEY = "current-index"
TIMESTAMP_KEY = "data-timestamp"
EVENTS_CACHE_KEY = "events-cache"

DATA_EXPIRY_DAYS = 4
MILLIS_PER_DAY = 1000 * 60 * 60 * 24


class ActionKind(Enum):
    """Kind of an undoable decision."""

    ACCEPTED = "accepted"
    SKIPPED = "skipped"
    UNCHANGED = "unchanged"


def is_fresh(now_millis: int, last_fetch_millis: int | None, expiry_days: float = DATA_EXPIRY_DAYS) -> bool:
    """True iff fewer than expiry_days have elapsed since the last fetch."""
    if last_fetch_millis is None:
        return False
    elapsed_days = (now_millis - last_fetch_millis) / MILLIS_PER_DAY
    return elapsed_days < expiry_days


class DecisionStore:
    """
    Persistent accept/reject outcomes.

    The in-memory copy is authoritative for the running session. Each
    decision writes the selections and processed-ids slots together; if the
    second write fails the first is rolled back so the persisted pair never
    disagrees.
    """

    def __init__(self, state_store: StateStore):
        self.state_store = state_store
        self._selections: list[Event] = self._load_selections()
        self._processed: list[str] = self._load_processed()

    # ============== Reading ==============

    @property
    def selections(self) -> list[Event]:
        """Accepted events in acceptance order."""
        return list(self._selections)

    @property
    def processed_ids(self) -> set[str]:
        return set(self._processed)

    def is_accepted(self, event_id: str) -> bool:
        return any(e.event_id == event_id for e in self._selections)

    def is_processed(self, event_id: str) -> bool:
        return event_id in self._processed

    def _read(self, key: str) -> str | None:
        try:
            return self.state_store.read(key)
        except StorageError as e:
            logger.warning(f"Unable to read {key}: {e}")
            return None

    def _discard(self, key: str, reason: str) -> None:
        logger.warning(f"Discarding corrupt {key} slot: {reason}")
        try:
            self.state_store.remove(key)
        except StorageError as e:
            logger.warning(f"Unable to remove {key}: {e}")

    def _load_json_list(self, key: str) -> list | None:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            self._discard(key, str(e))
            return None
        if not isinstance(data, list):
            self._discard(key, f"expected a list, got {type(data).__name__}")
            return None
        return data

    def _load_events(self, key: str) -> list[Event] | None:
        data = self._load_json_list(key)
        if data is None:
            return None
        try:
            return [Event.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            self._discard(key, f"malformed event ({e})")
            return None

    def _load_selections(self) -> list[Event]:
        return self._load_events(SELECTIONS_KEY) or []

    def _load_processed(self) -> list[str]:
        data = self._load_json_list(PROCESSED_KEY) or []
        processed = []
        for item in data:
            if isinstance(item, str) and item not in processed:
                processed.append(item)
        # Accepted events are always processed
        for event in self._selections:
            if event.event_id not in processed:
                processed.append(event.event_id)
        return processed

    # ============== Writing ==============

    def _write(self, key: str, value: str) -> bool:
        try:
            self.state_store.write(key, value)
            return True
        except StorageError as e:
            logger.warning(f"Unable to persist {key}: {e}")
            return False

    def _commit(self, selections: list[Event], processed: list[str]) -> None:
        """Replace decision state and persist both slots together."""
        previous = self._read(SELECTIONS_KEY)
        self._selections = selections
        self._processed = processed

        if not self._write(SELECTIONS_KEY, json.dumps([e.to_dict() for e in selections])):
            return
        if not self._write(PROCESSED_KEY, json.dumps(processed)):
            if previous is None:
                try:
                    self.state_store.remove(SELECTIONS_KEY)
                except StorageError as e:
                    logger.warning(f"Unable to roll back {SELECTIONS_KEY}: {e}")
            else:
                self._write(SELECTIONS_KEY, previous)

    def record_accept(self, event: Event) -> bool:
        """
        Accept an event.

        Idempotent: an already-accepted event is only marked processed.

        Returns:
            True if a new selection was recorded
        """
        added = not self.is_accepted(event.event_id)
        selections = self._selections + [event] if added else list(self._selections)
        processed = list(self._processed)
        if event.event_id not in processed:
            processed.append(event.event_id)

        if added or processed != self._processed:
            self._commit(selections, processed)
        return added

    def record_reject(self, event: Event) -> None:
        """Mark an event as processed without selecting it."""
        if event.event_id in self._processed:
            return
        self._commit(list(self._selections), self._processed + [event.event_id])

    def undo_last(self, kind: ActionKind, event: Event, was_processed: bool = False) -> None:
        """
        Reverse the effect of the most recent accept/reject for an event.

        was_processed keeps the ID processed when an earlier decision for the
        same ID still stands.
        """
        if kind is ActionKind.UNCHANGED:
            return
        selections = list(self._selections)
        if kind is ActionKind.ACCEPTED:
            selections = [e for e in selections if e.event_id != event.event_id]
        processed = list(self._processed)
        if not was_processed:
            processed = [pid for pid in processed if pid != event.event_id]
        self._commit(selections, processed)

    def reconcile(self, current_event_ids) -> int:
        """
        Drop decisions for events no longer present upstream.

        Returns:
            Number of selections and processed IDs removed
        """
        valid = set(current_event_ids)
        selections = [e for e in self._selections if e.event_id in valid]
        processed = [pid for pid in self._processed if pid in valid]

        removed = (len(self._selections) - len(selections)) + (len(self._processed) - len(processed))
        if removed:
            logger.info(f"Reconciled decisions, dropped {removed} stale entries")
            self._commit(selections, processed)
        return removed

    def reset(self) -> None:
        """Clear all decisions and the cursor."""
        self._commit([], [])
        self.save_cursor(0)

    # ============== Cursor ==============

    def load_cursor(self) -> int:
        raw = self._read(CURSOR_KEY)
        if raw is None:
            return 0
        try:
            return max(int(raw), 0)
        except ValueError:
            self._discard(CURSOR_KEY, f"not an integer: {raw!r}")
            return 0

    def save_cursor(self, cursor: int) -> None:
        self._write(CURSOR_KEY, str(cursor))

    # ============== Ingestion cache ==============

    def load_timestamp(self) -> int | None:
        """Epoch millis of the last successful ingestion, or None."""
        raw = self._read(TIMESTAMP_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            self._discard(TIMESTAMP_KEY, f"not an integer: {raw!r}")
            return None

    def is_cache_fresh(self, now_millis: int, expiry_days: float = DATA_EXPIRY_DAYS) -> bool:
        return is_fresh(now_millis, self.load_timestamp(), expiry_days)

    def load_cached_events(self) -> list[Event] | None:
        """Cached normalized events, or None if absent or corrupt."""
        return self._load_events(EVENTS_CACHE_KEY)

    def save_cache(self, events: list[Event], fetched_at_millis: int) -> None:
        """Overwrite the cache entry after a successful ingestion."""
        if self._write(EVENTS_CACHE_KEY, json.dumps([e.to_dict() for e in events])):
            self._write(TIMESTAMP_KEY, str(fetched_at_millis))
