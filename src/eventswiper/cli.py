"""Event Swiper CLI - triage conference events and export a calendar."""

import json
import logging
import sys
from pathlib import Path

import click

from .adapters.console import ConsolePresenter, format_event
from .config import load_config
from .core.ics import ExportOutcome
from .core.normalize import sort_events
from .workflows import export_selected, get_store, load_session, now_millis

CHOICES = {
    "a": "accept",
    "r": "reject",
    "u": "undo",
    "q": "quit",
}


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Event Swiper - triage conference events one at a time."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
def swipe():
    """Accept or reject events one at a time."""
    config = load_config()
    presenter = ConsolePresenter()
    controller = load_session(config, presenter)

    if presenter.errors:
        sys.exit(1)

    while True:
        if controller.current_event is None and not controller.can_undo:
            break

        options = "[a]ccept [r]eject" if controller.current_event else ""
        if controller.can_undo:
            options = f"{options} [u]ndo".strip()
        click.echo(
            f"\n({presenter.selected_count} selected, {presenter.remaining_count} remaining) "
            f"{options} [q]uit"
        )
        choice = click.prompt(">", type=click.Choice(list(CHOICES)), show_choices=False)

        match CHOICES[choice]:
            case "accept":
                if not controller.decide(accept=True):
                    click.echo("Nothing to accept.")
            case "reject":
                if not controller.decide(accept=False):
                    click.echo("Nothing to reject.")
            case "undo":
                if not controller.undo():
                    click.echo("Nothing to undo.")
            case "quit":
                break

    click.echo(f"\n{presenter.selected_count} events selected.")


@main.command()
def refresh():
    """Re-fetch events from the remote API."""
    config = load_config()
    presenter = ConsolePresenter(show_events=False)
    controller = load_session(config, presenter, mode="refresh")

    if presenter.errors:
        sys.exit(1)

    click.echo(
        f"Events refreshed from the remote API. "
        f"{len(controller.events)} undecided, {len(controller.store.selections)} selected."
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def selected(as_json: bool):
    """List accepted events."""
    store = get_store(load_config())
    events = sort_events(store.selections)

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in events], indent=2))
        return

    if not events:
        click.echo("No events selected yet.")
        return

    for event in events:
        click.echo(format_event(event))
        click.echo()


@main.command()
@click.option("--output", "-o", "output_dir", default=None, type=click.Path(file_okay=False),
              help="Directory to write the .ics file to")
def export(output_dir: str | None):
    """Export accepted events as an .ics calendar file."""
    config = load_config()
    store = get_store(config)

    if not store.selections:
        click.echo("No events to export!", err=True)
        sys.exit(1)

    directory = Path(output_dir) if output_dir else config.export_path
    path, report = export_selected(store, directory, calendar_name=config.calendar_name)

    if report.outcome is ExportOutcome.FAILURE:
        click.echo(f"Error: {report.summary()}", err=True)
        sys.exit(1)

    click.echo(report.summary())
    click.echo(f"✓ Calendar saved to {path}")


@main.command()
@click.option("--yes", is_flag=True, help="Skip confirmation")
def reset(yes: bool):
    """Reset all selections and start over."""
    if not yes and not click.confirm("Reset all selections and start over?"):
        return

    store = get_store(load_config())
    store.reset()
    click.echo("All selections cleared.")


@main.command()
def status():
    """Show selection counts and cache age."""
    config = load_config()
    store = get_store(config)

    cached = store.load_cached_events()
    timestamp = store.load_timestamp()

    if cached is None or timestamp is None:
        cache_text = "No cached events"
    else:
        age_days = (now_millis() - timestamp) / (1000 * 60 * 60 * 24)
        fresh = "fresh" if store.is_cache_fresh(now_millis(), config.data_expiry_days) else "stale"
        cache_text = f"{len(cached)} events, fetched {age_days:.1f} days ago ({fresh})"

    processed = store.processed_ids
    undecided = len([e for e in cached or [] if e.event_id not in processed])

    click.echo(f"Selected:  {len(store.selections)}")
    click.echo(f"Processed: {len(processed)}")
    click.echo(f"Remaining: {undecided}")
    click.echo(f"Cache:     {cache_text}")


if __name__ == "__main__":
    main()
