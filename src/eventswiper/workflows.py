"""Shared workflow layer between the CLI and the core.

Wires adapters to the core and runs the multi-step operations: ingesting
events (from cache or the network) and exporting the selection.
"""

import logging
import time
from datetime import datetime
from pathlib import Path

from .adapters.file_store import FileStateStore
from .adapters.http_source import HttpEventSource
from .config import Config
from .core.decisions import DecisionStore
from .core.errors import NetworkError, ValidationError
from .core.ics import ExportOutcome, ExportReport, export_events, export_filename
from .core.normalize import normalize_payloads
from .core.session import SessionController
from .ports import EventSource, Presenter

logger = logging.getLogger(__name__)

NETWORK_FAILURE_MESSAGE = "No connectivity: could not reach the event server. Check your connection and try again."
BAD_RESPONSE_MESSAGE = "Bad response: the event server returned data that could not be read. Try again later."


def now_millis() -> int:
    return int(time.time() * 1000)


def get_store(config: Config) -> DecisionStore:
    """Decision store backed by the configured state directory."""
    return DecisionStore(FileStateStore(config.state_path))


def build_controller(
    config: Config, presenter: Presenter | None = None, store: DecisionStore | None = None
) -> SessionController:
    return SessionController(store or get_store(config), presenter)


def ingest(
    controller: SessionController,
    source: EventSource,
    mode: str = "initial",
    expiry_days: float = 4,
    now: int | None = None,
) -> bool:
    """
    Load events into the controller.

    In "initial" mode a fresh cache is used when available; "refresh" always
    fetches. A successful fetch overwrites the cache and reconciles decisions
    against the new event IDs. Failures empty the working list and are
    reported through the presenter; the cache is left untouched.

    Returns:
        True if events were loaded
    """
    store = controller.store
    now = now if now is not None else now_millis()

    if mode == "initial" and store.is_cache_fresh(now, expiry_days):
        cached = store.load_cached_events()
        if cached is not None:
            logger.info(f"Data is fresh, loaded {len(cached)} events from cache")
            controller.load(cached)
            return True
        logger.info("No cached data found, fetching from API")

    token = controller.begin_loading()
    if token is None:
        return False

    try:
        events_payload = source.fetch_events()
        speakers_payload = source.fetch_speakers()
        events = normalize_payloads(events_payload, speakers_payload)
    except NetworkError as e:
        logger.error(f"Failed to load events: {e}")
        controller.fail_loading(token, NETWORK_FAILURE_MESSAGE)
        return False
    except ValidationError as e:
        logger.error(f"Failed to load events: {e}")
        controller.fail_loading(token, BAD_RESPONSE_MESSAGE)
        return False

    store.save_cache(events, now)
    store.reconcile(e.event_id for e in events)
    return controller.complete_loading(token, events)


def load_session(config: Config, presenter: Presenter | None = None, mode: str = "initial") -> SessionController:
    """Build a controller and ingest with the HTTP source."""
    controller = build_controller(config, presenter)
    ingest(controller, HttpEventSource(config), mode=mode, expiry_days=config.data_expiry_days)
    return controller


def export_selected(
    store: DecisionStore,
    directory: Path,
    now: datetime | None = None,
    calendar_name: str = "Selected Events",
    filename: str | None = None,
) -> tuple[Path | None, ExportReport]:
    """
    Export accepted events to an .ics file.

    Returns:
        (written path or None on total failure, report)
    """
    now = now or datetime.now().astimezone()
    document, report = export_events(store.selections, now=now, calendar_name=calendar_name)

    if report.outcome is ExportOutcome.FAILURE:
        return None, report

    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (filename or export_filename(int(now.timestamp() * 1000)))
    path.write_bytes(document)
    logger.info(f"Wrote {path}")
    return path, report
