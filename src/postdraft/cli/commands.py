"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from postdraft.config import Settings, load_config
from postdraft.core.errors import DraftPipelineError, ValidationError
from postdraft.core.pipeline import run_draft, run_import, run_publish, run_show, run_unpublish
from postdraft.crud.database import init_db, make_engine, reset_db
from postdraft.crud.posts import SQLPostRepository
from postdraft.logging_config import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config and set up logging with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings)
    return settings


def _repository(settings: Settings) -> SQLPostRepository:
    engine = make_engine(settings.db_url)
    init_db(engine)
    return SQLPostRepository(engine)


def _fail_pipeline(e: DraftPipelineError) -> None:
    if isinstance(e, ValidationError):
        for name, message in sorted(e.fields.items()):
            typer.echo(f"  {name}: {message}", err=True)
    _fail(str(e))


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def import_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown, HTML or text file to import")],
    out: Annotated[Optional[Path], typer.Option("--out", help="Write the normalized markdown here")] = None,
    excerpt_length: Annotated[Optional[int], typer.Option("--excerpt-length", help="Max excerpt length")] = None,
    ):
    """Parse a file and print the detected format, title and excerpt."""
    settings = _settings(overrides={"excerpt_max_length": excerpt_length})
    try:
        result = run_import(path, settings)
    except DraftPipelineError as e:
        _fail_pipeline(e)

    typer.echo(f"format:  {result.metadata['detected_format']} -> {result.format.value}")
    typer.echo(f"title:   {result.title or '-'}")
    typer.echo(f"excerpt: {result.excerpt or '-'}")
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.content, encoding="utf-8")
        typer.echo(f"Wrote normalized content to {out}")


def draft_cmd(
    path: Annotated[Path, typer.Argument(help="File to import as a new draft")],
    publish: Annotated[bool, typer.Option("--publish", help="Publish instead of saving a draft")] = False,
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL")] = None,
    ):
    """Import a file into a new post and save it as a draft (or publish it)."""
    settings = _settings(overrides={"db_url": db_url})
    repository = _repository(settings)
    try:
        _, state = run_draft(path, repository, settings, publish=publish)
    except DraftPipelineError as e:
        _fail_pipeline(e)

    fields = state.fields
    typer.echo(f"  {fields.status.value}: {fields.slug} ({state.post_id})")
    typer.echo(f"Saved '{fields.title}'")


def publish_cmd(
    post_id: Annotated[str, typer.Argument(help="Id of the post to publish")],
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL")] = None,
    ):
    """Publish a stored post."""
    settings = _settings(overrides={"db_url": db_url})
    try:
        state = run_publish(post_id, _repository(settings), settings)
    except DraftPipelineError as e:
        _fail_pipeline(e)
    typer.echo(f"  {state.fields.status.value}: {state.fields.slug}")


def unpublish_cmd(
    post_id: Annotated[str, typer.Argument(help="Id of the post to unpublish")],
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL")] = None,
    ):
    """Move a published post back to draft."""
    settings = _settings(overrides={"db_url": db_url})
    try:
        state = run_unpublish(post_id, _repository(settings), settings)
    except DraftPipelineError as e:
        _fail_pipeline(e)
    typer.echo(f"  {state.fields.status.value}: {state.fields.slug}")


def show_cmd(
    post_id: Annotated[str, typer.Argument(help="Id of the post to show")],
    db_url: Annotated[Optional[str], typer.Option("--db-url", help="Database URL")] = None,
    ):
    """Print a stored post as JSON."""
    settings = _settings(overrides={"db_url": db_url})
    try:
        record = run_show(post_id, _repository(settings))
    except DraftPipelineError as e:
        _fail_pipeline(e)
    typer.echo(record.model_dump_json(indent=2))
