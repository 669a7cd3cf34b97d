"""Session controller - one-event-at-a-time triage state machine.

The controller owns the working event list and a single SessionState value.
Every decision is written to the DecisionStore before the cursor moves, and
all UI feedback goes through a Presenter.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .decisions import ActionKind, DecisionStore
from .events import Event
from .gestures import GestureOutcome

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Controller phase."""

    IDLE = "idle"
    AWAITING_DECISION = "awaiting_decision"
    COMMITTING = "committing"


@dataclass
class LastAction:
    """The single undoable decision."""

    kind: ActionKind
    event: Event
    cursor_before: int
    was_processed: bool = False


@dataclass
class SessionState:
    """Mutable triage state for one session."""

    cursor: int = 0
    last_action: LastAction | None = None
    action_in_progress: bool = False
    is_loading: bool = False
    generation: int = 0
    phase: Phase = Phase.IDLE


class SessionController:
    """
    Drives triage over the working event list.

    Decisions are two-step: accept()/reject() record the outcome and enter
    COMMITTING, complete_transition() advances the cursor once the host UI has
    finished its exit effect. Hosts without an effect call both in sequence.
    """

    def __init__(self, store: DecisionStore, presenter=None):
        self.store = store
        self.presenter = presenter
        self.state = SessionState()
        self._ingested: list[Event] = []
        self.events: list[Event] = []

    # ============== Queries ==============

    @property
    def current_event(self) -> Event | None:
        if self.state.phase is Phase.IDLE or self.state.cursor >= len(self.events):
            return None
        return self.events[self.state.cursor]

    @property
    def is_exhausted(self) -> bool:
        return self.state.phase is not Phase.IDLE and self.state.cursor >= len(self.events)

    @property
    def remaining_count(self) -> int:
        return max(len(self.events) - self.state.cursor, 0)

    @property
    def can_undo(self) -> bool:
        return self.state.last_action is not None and not self.state.action_in_progress

    def _can_decide(self) -> bool:
        return (
            self.state.phase is Phase.AWAITING_DECISION
            and not self.state.action_in_progress
            and not self.state.is_loading
            and self.current_event is not None
        )

    # ============== Ingestion ==============

    def begin_loading(self) -> int | None:
        """
        Enter the loading state.

        Returns:
            Generation token for this load, or None if a load is already running
        """
        if self.state.is_loading:
            logger.info("Ingestion already in progress, ignoring request")
            return None
        self.state.is_loading = True
        self.state.generation += 1
        return self.state.generation

    def complete_loading(self, token: int, events: list[Event]) -> bool:
        """Apply a finished ingestion. Stale results are discarded."""
        if token != self.state.generation:
            logger.info(f"Discarding stale ingestion result (token {token})")
            return False
        self.state.is_loading = False
        self.load(events)
        return True

    def fail_loading(self, token: int, message: str) -> bool:
        """Apply a failed ingestion: empty working list, notify the user."""
        if token != self.state.generation:
            logger.info(f"Discarding stale ingestion failure (token {token})")
            return False
        self.state.is_loading = False
        self._ingested = []
        self.events = []
        self.state.cursor = 0
        self.state.last_action = None
        self.state.phase = Phase.AWAITING_DECISION
        if self.presenter:
            self.presenter.on_ingestion_error(message)
        self._refresh_view()
        return True

    def load(self, events: list[Event]) -> None:
        """Start triage over events, excluding everything already decided."""
        processed = self.store.processed_ids
        self._ingested = list(events)
        self.events = [e for e in events if e.event_id not in processed]
        self.state.cursor = 0
        self.state.last_action = None
        self.state.action_in_progress = False
        self.state.phase = Phase.AWAITING_DECISION
        self.store.save_cursor(0)
        logger.info(
            f"Loaded {len(self.events)} undecided events "
            f"({len(events) - len(self.events)} already processed)"
        )
        self._refresh_view()

    # ============== Decisions ==============

    def accept(self) -> bool:
        """Accept the current event. Returns False if the intent was ignored."""
        if not self._can_decide():
            return False
        event = self.current_event
        was_processed = self.store.is_processed(event.event_id)
        self._begin_commit()
        added = self.store.record_accept(event)
        if added:
            kind = ActionKind.ACCEPTED
        elif was_processed:
            # Same ID decided earlier in the list
            kind = ActionKind.UNCHANGED
        else:
            kind = ActionKind.SKIPPED
        self.state.last_action = LastAction(kind, event, self.state.cursor, was_processed)
        logger.debug(f"Accepted {event.event_id} ({kind.value})")
        return True

    def reject(self) -> bool:
        """Reject the current event. Returns False if the intent was ignored."""
        if not self._can_decide():
            return False
        event = self.current_event
        kind = ActionKind.UNCHANGED if self.store.is_processed(event.event_id) else ActionKind.SKIPPED
        self._begin_commit()
        self.store.record_reject(event)
        self.state.last_action = LastAction(kind, event, self.state.cursor)
        logger.debug(f"Rejected {event.event_id}")
        return True

    def _begin_commit(self) -> None:
        self.state.action_in_progress = True
        self.state.phase = Phase.COMMITTING
        if self.presenter:
            self.presenter.on_undo_available(False)

    def complete_transition(self) -> None:
        """Advance past the decided event once the exit effect has finished."""
        if self.state.phase is not Phase.COMMITTING:
            return
        self.state.cursor += 1
        self.state.action_in_progress = False
        self.state.phase = Phase.AWAITING_DECISION
        self.store.save_cursor(self.state.cursor)
        self._refresh_view()

    def decide(self, accept: bool) -> bool:
        """Accept or reject and complete the transition immediately."""
        committed = self.accept() if accept else self.reject()
        if committed:
            self.complete_transition()
        return committed

    def apply_gesture(self, outcome: GestureOutcome) -> bool:
        """Commit a classified drag gesture. Cancelled and scroll gestures do nothing."""
        if outcome is GestureOutcome.ACCEPT:
            return self.accept()
        if outcome is GestureOutcome.REJECT:
            return self.reject()
        return False

    def undo(self) -> bool:
        """Reverse the last decision. Single level; returns False if nothing to undo."""
        if not self.can_undo or self.state.phase is not Phase.AWAITING_DECISION:
            return False
        action = self.state.last_action
        self.store.undo_last(action.kind, action.event, action.was_processed)
        self.state.cursor = action.cursor_before
        self.state.last_action = None
        self.store.save_cursor(self.state.cursor)
        logger.debug(f"Undid {action.kind.value} of {action.event.event_id}")
        self._refresh_view()
        return True

    def reset(self) -> None:
        """Clear every decision and start over with the full ingested list."""
        if self.state.action_in_progress or self.state.is_loading:
            return
        self.store.reset()
        self.events = list(self._ingested)
        self.state.cursor = 0
        self.state.last_action = None
        if self.state.phase is Phase.IDLE and self.events:
            self.state.phase = Phase.AWAITING_DECISION
        self._refresh_view()

    # ============== Presentation ==============

    def _refresh_view(self) -> None:
        if not self.presenter:
            return
        self.presenter.on_counters(len(self.store.selections), self.remaining_count)
        self.presenter.on_event_shown(self.current_event)
        self.presenter.on_undo_available(self.can_undo)
