"""Pure event domain model - no I/O dependencies."""

from dataclasses import dataclass, field


@dataclass
class Speaker:
    """A resolved speaker attached to an event."""

    name: str
    job_title: str = ""
    company: str = ""
    bio: str = ""
    image: str = ""
    type: str = ""

    def format_line(self) -> str:
        """Format as 'Name - Title - Company (type)' for export."""
        info = " - ".join(part for part in (self.name, self.job_title, self.company) if part)
        role = f" ({self.type})" if self.type else ""
        return f"{info}{role}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "jobTitle": self.job_title,
            "company": self.company,
            "bio": self.bio,
            "image": self.image,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Speaker":
        return cls(
            name=data.get("name") or "",
            job_title=data.get("jobTitle") or "",
            company=data.get("company") or "",
            bio=data.get("bio") or "",
            image=data.get("image") or "",
            type=data.get("type") or "",
        )


@dataclass
class Event:
    """A conference event in canonical form."""

    event_id: str
    title: str
    description: str = ""
    date_display: str = "Date TBA"
    date_iso: str = ""
    start_time: str = ""
    end_time: str = ""
    venue: str = "Venue TBA"
    event_type: str = ""
    track: str = ""
    topics: list[str] = field(default_factory=list)
    speakers: list[Speaker] = field(default_factory=list)

    def format_time(self) -> str:
        """Format the event time range for display, e.g. '9:00AM - 10:30AM'."""
        return f"{_format_clock(self.start_time)} - {_format_clock(self.end_time)}"

    def primary_badge(self) -> str:
        return self.event_type or self.track

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used by the persisted slots."""
        return {
            "eventId": self.event_id,
            "title": self.title,
            "description": self.description,
            "date": self.date_display,
            "dateIso": self.date_iso,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "venue": self.venue,
            "eventType": self.event_type,
            "track": self.track,
            "topics": list(self.topics),
            "speakers": [s.to_dict() for s in self.speakers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create an Event from a persisted snapshot."""
        topics = data.get("topics")
        speakers = data.get("speakers")
        return cls(
            event_id=str(data["eventId"]),
            title=data.get("title") or "Untitled Event",
            description=data.get("description") or "",
            date_display=data.get("date") or "Date TBA",
            date_iso=data.get("dateIso") or "",
            start_time=data.get("startTime") or "",
            end_time=data.get("endTime") or "",
            venue=data.get("venue") or "Venue TBA",
            event_type=data.get("eventType") or "",
            track=data.get("track") or "",
            topics=[str(t) for t in topics] if isinstance(topics, list) else [],
            speakers=[
                Speaker.from_dict(s) for s in speakers if isinstance(s, dict)
            ] if isinstance(speakers, list) else [],
        )


def _format_clock(value: str) -> str:
    """Render an HHMM string as 12-hour time; pass other values through."""
    if not value or len(value) != 4 or not value.isdigit():
        return value or "TBA"
    hours = int(value[:2])
    period = "PM" if hours >= 12 else "AM"
    display = 12 if hours % 12 == 0 else hours % 12
    return f"{display}:{value[2:]}{period}"
