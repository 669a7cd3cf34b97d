"""Normalization of raw upstream event and speaker records.

Pure functions - no I/O. Raw records come from the events and speakers
collections; both expose their records under an ``entities`` list and are
joined by ``appSpeakerId``.
"""

import hashlib
import logging
import re
from datetime import date
from functools import cmp_to_key

from bs4 import BeautifulSoup

from .errors import InvalidPayloadError
from .events import Event, Speaker

logger = logging.getLogger(__name__)

_COMPACT_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_NON_DIGITS = re.compile(r"\D")


def normalize_date(value) -> str:
    """
    Normalize a date to YYYY-MM-DD.

    Accepts YYYYMMDD, YYYY-MM-DD and M/D/YYYY (one or two digit month/day).
    Returns "" for anything else, including impossible dates.
    """
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""

    if match := _COMPACT_DATE.match(text) or _ISO_DATE.match(text):
        year, month, day = match.groups()
    elif match := _US_DATE.match(text):
        month, day, year = match.groups()
    else:
        logger.warning(f"Unrecognized date format: {text!r}")
        return ""

    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        logger.warning(f"Invalid calendar date: {text!r}")
        return ""


def normalize_time(value) -> str:
    """
    Normalize a time to 24h HHMM.

    Non-digits are stripped first. 3 digits are zero-padded (900 -> 0900),
    6 digits lose their seconds (143000 -> 1430). Returns "" when the time
    is unknown.
    """
    if value is None:
        return ""
    digits = _NON_DIGITS.sub("", str(value))

    if len(digits) == 3:
        digits = "0" + digits
    elif len(digits) == 6:
        digits = digits[:4]
    elif len(digits) != 4:
        if digits:
            logger.debug(f"Unrecognized time value: {value!r}")
        return ""

    if int(digits[:2]) > 23 or int(digits[2:]) > 59:
        logger.debug(f"Out of range time value: {value!r}")
        return ""
    return digits


def strip_html(html: str | None) -> str:
    """Convert rich text to plain text."""
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text().strip()


def extract_entities(payload, label: str) -> list[dict]:
    """Return the entities list of a payload or raise InvalidPayloadError."""
    if not isinstance(payload, dict) or not isinstance(payload.get("entities"), list):
        raise InvalidPayloadError(f"Invalid {label} payload received.")
    return payload["entities"]


def build_speaker_map(records: list[dict]) -> dict[str, dict]:
    """Map speaker identifier to display info."""
    speakers = {}
    for record in records:
        if not isinstance(record, dict):
            continue
        name = f"{record.get('firstName') or ''} {record.get('lastName') or ''}".strip()
        speakers[record.get("appSpeakerId")] = {
            "name": name,
            "job_title": record.get("jobTitle") or "",
            "company": record.get("company") or "",
            "bio": record.get("speakerBiography") or "",
            "image": record.get("imageSrc") or "",
        }
    return speakers


def resolve_speakers(references, speaker_map: dict[str, dict]) -> list[Speaker]:
    """Resolve an event's speaker references, dropping unnamed speakers."""
    if not isinstance(references, list):
        return []

    resolved = []
    for ref in references:
        if not isinstance(ref, dict):
            continue
        info = speaker_map.get(ref.get("appSpeakerId"), {})
        if not info.get("name"):
            continue
        resolved.append(Speaker(**info, type=ref.get("speakerType") or ""))
    return resolved


def synthesize_event_id(title: str, date_iso: str, start_time: str, venue: str) -> str:
    """Build a stable identifier for an event that arrived without one."""
    key = f"{title}|{date_iso}|{start_time}|{venue}"
    return "temp-" + hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


def normalize_event(record: dict, speaker_map: dict[str, dict]) -> Event:
    """Convert one raw event record into a canonical Event."""
    title = record.get("title") or "Untitled Event"
    date_iso = normalize_date(record.get("dateIso"))
    start_time = normalize_time(record.get("startTime"))
    venue = record.get("eventVenue") or "Venue TBA"
    topics = record.get("eventTopics")

    event_id = record.get("eventId")
    if not event_id:
        event_id = synthesize_event_id(title, date_iso, start_time, venue)

    return Event(
        event_id=str(event_id),
        title=title,
        description=record.get("description") or "",
        date_display=record.get("dateLong") or "Date TBA",
        date_iso=date_iso,
        start_time=start_time,
        end_time=normalize_time(record.get("endTime")),
        venue=venue,
        event_type=record.get("eventTypeName") or "",
        track=record.get("track") or "",
        topics=[str(t) for t in topics] if isinstance(topics, list) else [],
        speakers=resolve_speakers(record.get("speakerData"), speaker_map),
    )


def _compare_events(a: Event, b: Event) -> int:
    if a.date_iso and b.date_iso and a.date_iso != b.date_iso:
        return -1 if a.date_iso < b.date_iso else 1
    if a.start_time and b.start_time and a.start_time != b.start_time:
        return -1 if a.start_time < b.start_time else 1
    return 0


def sort_events(events: list[Event]) -> list[Event]:
    """Sort by date, then start time. Incomparable entries keep their order."""
    return sorted(events, key=cmp_to_key(_compare_events))


def normalize_payloads(events_payload, speakers_payload) -> list[Event]:
    """
    Run the full normalization pipeline.

    Args:
        events_payload: Raw events response ({"entities": [...]})
        speakers_payload: Raw speakers response ({"entities": [...]})

    Returns:
        Canonical events sorted by date and start time

    Raises:
        InvalidPayloadError: If either payload lacks an entities list
    """
    event_records = extract_entities(events_payload, "events")
    speaker_records = extract_entities(speakers_payload, "speakers")

    speaker_map = build_speaker_map(speaker_records)
    events = [
        normalize_event(record, speaker_map)
        for record in event_records
        if isinstance(record, dict)
    ]

    logger.info(f"Normalized {len(events)} events with {len(speaker_map)} speakers")
    return sort_events(events)
