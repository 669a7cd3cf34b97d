"""Ports - interfaces/protocols for external dependencies."""

from .state_store import StateStore
from .event_source import EventSource
from .presenter import Presenter

__all__ = [
    "StateStore",
    "EventSource",
    "Presenter",
]
