"""CLI entry point for Boardkeeper.

Meant to run from a scheduled GitLab CI pipeline; all connection settings
come from the job environment.
"""

from __future__ import annotations

import os
import sys
from datetime import date, datetime
from pathlib import Path

import click

from boardkeeper.config import Settings, load_taxonomy
from boardkeeper.exceptions import BoardkeeperError
from boardkeeper.labels import LabelEngine, utc_now
from boardkeeper.logging import setup_logging
from boardkeeper.runner import Runner, RunReport
from boardkeeper.schedule import StandupSchedule
from boardkeeper.standup import StandupWriter
from boardkeeper.tracker import GitLabTracker


def _load_settings(labels_file: Path | None) -> Settings:
    settings = Settings.from_env(os.environ)
    if labels_file is not None:
        settings.taxonomy = load_taxonomy(labels_file)
    return settings


def build_runner(settings: Settings, force_standup: bool = False) -> tuple[GitLabTracker, Runner]:
    """Wire a runner to a GitLab tracker built from settings."""
    tracker = GitLabTracker.from_settings(settings)
    engine = LabelEngine(tracker, tracker, settings.taxonomy)
    writer = StandupWriter(tracker, tracker, settings.taxonomy)
    schedule = StandupSchedule(
        weekdays=settings.standup_weekdays,
        force_today=force_standup or settings.force_standup_today,
    )
    return tracker, Runner(tracker, engine, writer, schedule)


def _report(report: RunReport) -> None:
    """Print stage outcomes and exit non-zero if any stage failed."""
    for stage in report.stages:
        if stage.ok:
            click.echo(f"  {stage.name}: ok")
        else:
            click.echo(f"  {stage.name}: {stage.category}: {stage.error}", err=True)
    if not report.ok:
        sys.exit(1)


labels_file_option = click.option(
    "--labels-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file overriding the label taxonomy",
)
verbose_option = click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
log_dir_option = click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for log files (default: logs/)",
)


def _setup(verbose: bool, log_dir: Path | None) -> None:
    setup_logging(log_dir=log_dir, level="DEBUG" if verbose else None)


@click.group()
@click.version_option(package_name="boardkeeper")
def main() -> None:
    """Boardkeeper - keep a GitLab board and standup wiki consistent."""
    pass


@main.command()
@click.option(
    "--force-standup/--no-force-standup",
    default=False,
    help="Write standup notes for today even when it is not a standup day",
)
@labels_file_option
@verbose_option
@log_dir_option
def run(force_standup: bool, labels_file: Path | None, verbose: bool, log_dir: Path | None) -> None:
    """Adapt labels, clean closed issues and write standup notes."""
    _setup(verbose, log_dir)
    try:
        settings = _load_settings(labels_file)
    except BoardkeeperError as e:
        click.echo(f"{e.category}: {e}", err=True)
        sys.exit(1)

    tracker, runner = build_runner(settings, force_standup)
    try:
        report = runner.run()
    finally:
        tracker.close()
    _report(report)


@main.command()
@click.option(
    "--since",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"]),
    default=None,
    help="Clean closed issues updated since this time instead of the last run",
)
@labels_file_option
@verbose_option
@log_dir_option
def labels(
    since: datetime | None, labels_file: Path | None, verbose: bool, log_dir: Path | None
) -> None:
    """Only adapt urgency labels and clean status labels."""
    _setup(verbose, log_dir)
    try:
        settings = _load_settings(labels_file)
    except BoardkeeperError as e:
        click.echo(f"{e.category}: {e}", err=True)
        sys.exit(1)

    if since is not None and since.tzinfo is None:
        since = since.astimezone()

    tracker, runner = build_runner(settings)
    try:
        report = runner.run(last_run=since, standup=False)
    finally:
        tracker.close()
    _report(report)


@main.command()
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Standup date (default: today in UTC)",
)
@labels_file_option
@verbose_option
@log_dir_option
def standup(
    day: datetime | None, labels_file: Path | None, verbose: bool, log_dir: Path | None
) -> None:
    """Only write the standup notes page for a date, if it doesn't exist yet."""
    _setup(verbose, log_dir)
    try:
        settings = _load_settings(labels_file)
    except BoardkeeperError as e:
        click.echo(f"{e.category}: {e}", err=True)
        sys.exit(1)

    target: date = day.date() if day is not None else utc_now().date()
    tracker = GitLabTracker.from_settings(settings)
    writer = StandupWriter(tracker, tracker, settings.taxonomy)
    try:
        result = writer.write_notes(target)
    except BoardkeeperError as e:
        click.echo(f"{e.category}: {e}", err=True)
        sys.exit(1)
    finally:
        tracker.close()

    if result.created:
        click.echo(f"Created {result.title} with {len(result.relevant_issue_iids)} issue(s)")
    else:
        click.echo(f"Skipped {result.title}: {result.skipped_reason}")


if __name__ == "__main__":
    main()
