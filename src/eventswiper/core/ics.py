"""iCalendar export of accepted events.

Pure functions - the caller decides where the document goes.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from .errors import FormatError
from .events import Event
from .normalize import normalize_date, normalize_time, strip_html

logger = logging.getLogger(__name__)

TIMEZONE_ID = "America/Los_Angeles"
PRODUCT_ID = "-//Event Swiper//Selected Events//EN"
DEFAULT_CALENDAR_NAME = "Selected Events"
UID_DOMAIN = "eventswiper"
MAX_LINE_LENGTH = 75
CRLF = "\r\n"

# US Pacific: DST from the second Sunday of March, standard from the first
# Sunday of November, both at 02:00 local.
VTIMEZONE = [
    "BEGIN:VTIMEZONE",
    f"TZID:{TIMEZONE_ID}",
    "X-LIC-LOCATION:America/Los_Angeles",
    "BEGIN:DAYLIGHT",
    "TZOFFSETFROM:-0800",
    "TZOFFSETTO:-0700",
    "TZNAME:PDT",
    "DTSTART:19700308T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=3;BYDAY=2SU",
    "END:DAYLIGHT",
    "BEGIN:STANDARD",
    "TZOFFSETFROM:-0700",
    "TZOFFSETTO:-0800",
    "TZNAME:PST",
    "DTSTART:19701101T020000",
    "RRULE:FREQ=YEARLY;BYMONTH=11;BYDAY=1SU",
    "END:STANDARD",
    "END:VTIMEZONE",
]


class ExportOutcome(Enum):
    FAILURE = "failure"
    PARTIAL = "partial"
    SUCCESS = "success"


@dataclass
class ExportReport:
    """Counts from one export run."""

    exported_count: int = 0
    skipped_count: int = 0

    @property
    def outcome(self) -> ExportOutcome:
        if self.exported_count == 0:
            return ExportOutcome.FAILURE
        if self.skipped_count:
            return ExportOutcome.PARTIAL
        return ExportOutcome.SUCCESS

    def summary(self) -> str:
        """One-line user-facing description of the result."""
        if self.outcome is ExportOutcome.FAILURE:
            return "No events could be exported (missing or invalid dates/times)."
        noun = "event" if self.exported_count == 1 else "events"
        if self.outcome is ExportOutcome.PARTIAL:
            return (
                f"Exported {self.exported_count} {noun}; "
                f"skipped {self.skipped_count} with missing or invalid dates/times."
            )
        return f"Exported {self.exported_count} {noun}."


def escape_text(text: str | None) -> str:
    """Escape a TEXT property value."""
    if not text:
        return ""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """
    Fold a content line to at most 75 characters per physical line.

    Continuation lines start with a single space, which counts towards the
    limit, so each carries 74 characters of content.
    """
    if len(line) <= MAX_LINE_LENGTH:
        return line

    segments = [line[:MAX_LINE_LENGTH]]
    rest = line[MAX_LINE_LENGTH:]
    while rest:
        segments.append(" " + rest[: MAX_LINE_LENGTH - 1])
        rest = rest[MAX_LINE_LENGTH - 1 :]
    return CRLF.join(segments)


def format_local_datetime(day: date, hhmm: str) -> str:
    """Format as YYYYMMDDTHHMMSS floating in the declared timezone."""
    return f"{day.strftime('%Y%m%d')}T{hhmm}00"


def resolve_instants(event: Event) -> tuple[str, str]:
    """
    Resolve an event's start and end into iCalendar local date-times.

    An end time earlier than the start time means the event ends on the
    following day.

    Raises:
        FormatError: If the date or either time cannot be resolved
    """
    date_iso = normalize_date(event.date_iso)
    start = normalize_time(event.start_time)
    end = normalize_time(event.end_time)
    if not date_iso or not start or not end:
        raise FormatError(
            f"Unresolved date/time for {event.title!r}: "
            f"date={event.date_iso!r} start={event.start_time!r} end={event.end_time!r}"
        )

    start_day = date.fromisoformat(date_iso)
    end_day = start_day + timedelta(days=1) if int(start) > int(end) else start_day
    return format_local_datetime(start_day, start), format_local_datetime(end_day, end)


def build_description(event: Event) -> str:
    """Plain-text description with speakers and topics appended."""
    description = strip_html(event.description)

    if event.speakers:
        lines = ["Speakers:"] + [f"- {s.format_line()}" for s in event.speakers]
        description = f"{description}\n\n" + "\n".join(lines) if description else "\n".join(lines)

    meta = ([event.event_type] if event.event_type else []) + list(event.topics)
    if meta:
        topics = f"Topics: {', '.join(meta)}"
        description = f"{description}\n\n{topics}" if description else topics

    return description


def render_event(event: Event, stamp: str) -> list[str]:
    """Render one VEVENT block as content lines. Raises FormatError."""
    start, end = resolve_instants(event)
    return [
        "BEGIN:VEVENT",
        f"UID:{event.event_id}@{UID_DOMAIN}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;TZID={TIMEZONE_ID}:{start}",
        f"DTEND;TZID={TIMEZONE_ID}:{end}",
        f"SUMMARY:{escape_text(event.title)}",
        f"LOCATION:{escape_text(event.venue)}",
        f"DESCRIPTION:{escape_text(build_description(event))}",
        "STATUS:CONFIRMED",
        "END:VEVENT",
    ]


def export_events(
    events: list[Event],
    now: datetime | None = None,
    calendar_name: str = DEFAULT_CALENDAR_NAME,
) -> tuple[bytes, ExportReport]:
    """
    Render accepted events as an iCalendar document.

    Events whose date/time cannot be resolved are skipped and counted,
    never emitted partially.

    Returns:
        (UTF-8 document, report)
    """
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    report = ExportReport()

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODUCT_ID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-TIMEZONE:{TIMEZONE_ID}",
        f"X-WR-CALNAME:{escape_text(calendar_name)}",
        *VTIMEZONE,
    ]

    for event in events:
        try:
            lines.extend(render_event(event, stamp))
        except FormatError as e:
            logger.warning(f"Skipping event {event.event_id}: {e}")
            report.skipped_count += 1
            continue
        report.exported_count += 1

    lines.append("END:VCALENDAR")

    document = CRLF.join(fold_line(line) for line in lines) + CRLF
    logger.info(f"Exported {report.exported_count} events, skipped {report.skipped_count}")
    return document.encode("utf-8"), report


def export_filename(now_millis: int) -> str:
    return f"eventswiper-events-{now_millis}.ics"
