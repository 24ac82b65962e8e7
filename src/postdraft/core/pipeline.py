"""Pipeline step functions: import, draft, publish, unpublish and show orchestration"""

import asyncio
from pathlib import Path

from postdraft.config import Settings
from postdraft.core.errors import DraftPipelineError
from postdraft.core.models import ImportResult, PostRecord
from postdraft.core.parse import parse_file
from postdraft.crud.repo import PostRepository
from postdraft.session.editor import DraftSession
from postdraft.session.state import DraftSessionState
from postdraft.session.workflow import SaveOutcome


def _batch_settings(settings: Settings) -> Settings:
    """One-shot runs save explicitly; the autosave timer would only outlive them."""
    return settings.model_copy(update={"autosave_enabled": False})


def _raise_on_failure(outcome: SaveOutcome) -> SaveOutcome:
    if outcome.error is not None:
        raise outcome.error
    return outcome


def run_import(path: Path, settings: Settings) -> ImportResult:
    """Parse one file into an ImportResult without touching the database."""
    return asyncio.run(parse_file(
        path,
        max_bytes=settings.max_import_bytes,
        excerpt_max_length=settings.excerpt_max_length,
        title_max_length=settings.title_max_length,
    ))


async def _draft(path: Path, repository: PostRepository, settings: Settings, publish: bool):
    async with DraftSession(repository, _batch_settings(settings)) as session:
        result = await session.import_file(path)
        session.flush_derived()
        outcome = await (session.publish() if publish else session.save_draft())
        _raise_on_failure(outcome)
        return result, session.state


def run_draft(
    path: Path,
    repository: PostRepository,
    settings: Settings,
    publish: bool = False,
    ) -> tuple[ImportResult, DraftSessionState]:
    """Import a file into a fresh draft and save (or publish) it.

    Returns (import_result, final_session_state). Raises DraftPipelineError
    subclasses for read, parse, validation and persistence failures.
    """
    return asyncio.run(_draft(path, repository, settings, publish))


async def _transition(post_id: str, repository: PostRepository, settings: Settings, publish: bool):
    async with DraftSession(repository, _batch_settings(settings)) as session:
        await session.load_post(post_id)
        outcome = await (session.publish() if publish else session.unpublish())
        _raise_on_failure(outcome)
        return session.state


def run_publish(post_id: str, repository: PostRepository, settings: Settings) -> DraftSessionState:
    """Load a stored post and publish it (scheduled posts stay scheduled)."""
    return asyncio.run(_transition(post_id, repository, settings, publish=True))


def run_unpublish(post_id: str, repository: PostRepository, settings: Settings) -> DraftSessionState:
    """Load a stored post and move it back to draft."""
    return asyncio.run(_transition(post_id, repository, settings, publish=False))


def run_show(post_id: str, repository: PostRepository) -> PostRecord:
    """Fetch the canonical record of a stored post."""
    async def _show() -> PostRecord:
        try:
            return await repository.get_post_by_id(post_id)
        except ValueError as e:
            raise DraftPipelineError(str(e)) from e
    return asyncio.run(_show())
