"""Console presenter adapter - renders session feedback with click."""

import click

from eventswiper.core.events import Event
from eventswiper.core.normalize import strip_html

DESCRIPTION_LIMIT = 400


class ConsolePresenter:
    """
    Terminal presenter.

    Implements Presenter protocol. Keeps the latest counters so the prompt
    line can show them.
    """

    def __init__(self, show_events: bool = True):
        self.show_events = show_events
        self.selected_count = 0
        self.remaining_count = 0
        self.undo_available = False
        self.errors: list[str] = []

    def on_event_shown(self, event: Event | None) -> None:
        if not self.show_events:
            return
        if event is None:
            click.echo("\nNo more events. Run 'eventswiper refresh' to check for updates.")
            return
        click.echo()
        click.echo(format_event(event))

    def on_counters(self, selected_count: int, remaining_count: int) -> None:
        self.selected_count = selected_count
        self.remaining_count = remaining_count

    def on_undo_available(self, available: bool) -> None:
        self.undo_available = available

    def on_ingestion_error(self, message: str) -> None:
        self.errors.append(message)
        click.echo(f"Error: {message}", err=True)


def format_event(event: Event) -> str:
    """Multi-line card for one event."""
    lines = [click.style(event.title, bold=True)]
    lines.append(f"  {event.date_display} @ {event.format_time()}")
    lines.append(f"  {event.venue}")

    badges = [b for b in [event.primary_badge(), *event.topics[:2]] if b]
    if badges:
        lines.append("  " + " | ".join(badges))

    description = strip_html(event.description)
    if description:
        if len(description) > DESCRIPTION_LIMIT:
            description = description[:DESCRIPTION_LIMIT].rstrip() + "..."
        lines.append("")
        lines.append(f"  {description}")

    if event.speakers:
        lines.append("")
        lines.append("  Speakers:")
        for speaker in event.speakers:
            role = " • ".join(p for p in (speaker.company, speaker.job_title) if p)
            kind = f" ({speaker.type})" if speaker.type else ""
            lines.append(f"    {speaker.name}{kind}" + (f" - {role}" if role else ""))

    return "\n".join(lines)
