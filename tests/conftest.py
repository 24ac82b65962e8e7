"""Root test configuration: logger isolation and session-level cleanup of runtime artifacts"""

import logging
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["postdraft.db", "test.db"]


@pytest.fixture(autouse=True)
def isolate_postdraft_logger():
    """Undo configure_logging() after each test so caplog sees postdraft records again."""
    yield
    logger = logging.getLogger("postdraft")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
