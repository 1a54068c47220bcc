#!/usr/bin/env python3
"""
Command line entry point for the governance indexer.

- ``govindex replay EVENTS_FILE``: apply a JSON-lines event file to a store
- ``govindex show proposal ID``: print an indexed proposal
- ``govindex show governance``: print the governance counters and settings
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import click
import orjson
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from govindex.core.config import IndexerSettings
from govindex.core.dispatcher import EventDispatcher
from govindex.core.events import read_event_file
from govindex.core.logging import configure_logging_from_settings
from govindex.core.persistence import (
    EntityStore,
    PersistenceConfig,
    open_entity_store,
)
from govindex.core.repository import GovernanceRepository
from govindex.datastructures.governance_types import Proposal
from govindex.datastructures.identifiers import encode_id
from govindex.exceptions import GovernanceIndexError

console = Console()


def _settings(ctx: click.Context, db: Path | None, **overrides) -> IndexerSettings:
    persistence = (
        PersistenceConfig.for_sqlite_file(db) if db is not None else PersistenceConfig()
    )
    return dataclasses.replace(ctx.obj, persistence=persistence, **overrides)


def _print_record(title: str, record: dict[str, object], output: str) -> None:
    if output == "json":
        click.echo(orjson.dumps(record, option=orjson.OPT_INDENT_2).decode())
        return
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    for name, value in record.items():
        table.add_row(name, "" if value is None else escape(str(value)))
    console.print(table)


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Minimum log level",
)
@click.option(
    "--debug-scope",
    multiple=True,
    help="Enable DEBUG logs for a module (e.g. core.vote_tally)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, debug_scope: tuple[str, ...]):
    """
    Governance event indexer.

    Replays token, governor and executor events into an entity store and
    inspects the indexed proposals.
    """
    settings = IndexerSettings(log_level=log_level, debug_scopes=debug_scope)
    configure_logging_from_settings(settings)
    ctx.obj = settings


@cli.command()
@click.argument(
    "events_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--db",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SQLite database to index into (in-memory when omitted)",
)
@click.option(
    "--strict-actions",
    is_flag=True,
    help="Reject proposals whose action arrays differ in length",
)
@click.pass_context
def replay(
    ctx: click.Context, events_file: Path, db: Path | None, strict_actions: bool
):
    """Apply every event in EVENTS_FILE, in order."""
    settings = _settings(ctx, db, strict_proposal_actions=strict_actions)
    store = open_entity_store(settings.persistence)
    try:
        dispatcher = EventDispatcher.for_store(
            store, strict_proposal_actions=settings.strict_proposal_actions
        )
        applied = dispatcher.replay(read_event_file(events_file))
        data = dispatcher.governance_data.get()
    except GovernanceIndexError as exc:
        logger.error("Replay halted: {}", exc)
        console.print(f"[red]❌ Replay halted: {escape(str(exc))}[/red]")
        sys.exit(1)
    finally:
        store.close()

    table = Table(title="Replay Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Events applied", str(applied))
    table.add_row("Proposals", str(data.proposal_count))
    table.add_row("Total supply", str(data.total_supply))
    console.print(table)


@cli.group()
def show():
    """Inspect indexed entities."""
    pass


def _open_existing(db: Path) -> EntityStore:
    return open_entity_store(PersistenceConfig.for_sqlite_file(db))


@show.command("proposal")
@click.argument("proposal_id", type=click.IntRange(min=0))
@click.option(
    "--db",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="SQLite database produced by replay",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def show_proposal(proposal_id: int, db: Path, output: str):
    """Print the proposal with numeric id PROPOSAL_ID."""
    store = _open_existing(db)
    try:
        repository = GovernanceRepository(store)
        proposal = repository.load(Proposal, encode_id(proposal_id))
        if proposal is None:
            console.print(f"[red]❌ Proposal {proposal_id} not found[/red]")
            sys.exit(1)
        record = repository.serializer.to_dict(proposal)
    finally:
        store.close()
    _print_record(f"Proposal {proposal_id}", record, output)


@show.command("governance")
@click.option(
    "--db",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="SQLite database produced by replay",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def show_governance(db: Path, output: str):
    """Print governance counters and mirrored configuration."""
    store = _open_existing(db)
    try:
        repository = GovernanceRepository(store)
        record = repository.serializer.to_dict(repository.governance_data())
    finally:
        store.close()
    _print_record("Governance Data", record, output)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
