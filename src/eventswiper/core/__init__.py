"""Functional core - event triage logic with no network or file I/O."""

from .errors import (
    EventSwiperError,
    FormatError,
    InvalidPayloadError,
    NetworkError,
    StorageError,
    ValidationError,
)
from .events import Event, Speaker
from .normalize import normalize_date, normalize_time, normalize_payloads, sort_events
from .decisions import ActionKind, DecisionStore, is_fresh
from .gestures import GestureOutcome, GestureTracker
from .session import Phase, SessionController, SessionState
from .ics import ExportOutcome, ExportReport, export_events, fold_line

__all__ = [
    # Errors
    "EventSwiperError",
    "FormatError",
    "InvalidPayloadError",
    "NetworkError",
    "StorageError",
    "ValidationError",
    # Events
    "Event",
    "Speaker",
    # Normalization
    "normalize_date",
    "normalize_time",
    "normalize_payloads",
    "sort_events",
    # Decisions
    "ActionKind",
    "DecisionStore",
    "is_fresh",
    # Session
    "GestureOutcome",
    "GestureTracker",
    "Phase",
    "SessionController",
    "SessionState",
    # Export
    "ExportOutcome",
    "ExportReport",
    "export_events",
    "fold_line",
]
