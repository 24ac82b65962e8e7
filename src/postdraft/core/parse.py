"""Import orchestration: read -> detect -> (html) normalize -> extract -> ImportResult"""

import asyncio
import inspect
import logging
from pathlib import Path
from typing import Any, Union

from postdraft.core.convert import html_to_markdown
from postdraft.core.detect import detect_format
from postdraft.core.errors import ParseError, ReadError
from postdraft.core.extract.excerpt import EXCERPT_MAX_LENGTH, extract_excerpt
from postdraft.core.extract.title import TITLE_MAX_LENGTH, extract_title
from postdraft.core.models import DetectedFormat, ImportResult, RawImportFile


LOGGER = logging.getLogger("postdraft.import")

MAX_IMPORT_BYTES = 10 * 1024 * 1024

ImportSource = Union[RawImportFile, Path, Any]


def parse_text(
    name: str,
    text: str,
    excerpt_max_length: int = EXCERPT_MAX_LENGTH,
    title_max_length: int = TITLE_MAX_LENGTH,
    ) -> ImportResult:
    """Turn already-decoded text into an ImportResult. Raises ParseError on any failure."""
    try:
        detected = detect_format(name, text)
        content, fmt = text, detected
        if detected == DetectedFormat.html:
            content, fmt = html_to_markdown(text), DetectedFormat.markdown

        # The title comes from the source document so an html <title> is still found.
        title = extract_title(text, detected, max_length=title_max_length)
        excerpt = extract_excerpt(content, fmt, max_length=excerpt_max_length)
    except Exception as e:
        raise ParseError(f"Failed to parse file {name}: {e}") from e

    return ImportResult(
        title=title,
        content=content,
        excerpt=excerpt,
        format=fmt,
        metadata={"source_name": name, "detected_format": detected.value},
    )


def _too_large(name: str, size: int, max_bytes: int) -> ReadError:
    return ReadError(f"File {name} is too large: {size} bytes (limit {max_bytes})")


def _read_path(path: Path, max_bytes: int) -> RawImportFile:
    size = path.stat().st_size
    if size > max_bytes:
        raise _too_large(path.name, size, max_bytes)
    return RawImportFile.from_path(path)


async def _read_bytes(source: ImportSource, max_bytes: int) -> tuple[str, int, str, bytes]:
    """Return (name, size, media_type, data) for any supported file-like source."""
    if isinstance(source, RawImportFile):
        return source.name, source.size, source.media_type, source.data

    if isinstance(source, Path):
        raw = await asyncio.to_thread(_read_path, source, max_bytes)
        return raw.name, raw.size, raw.media_type, raw.data

    name = getattr(source, "name", None) or getattr(source, "filename", None) or ""
    media_type = getattr(source, "media_type", None) or getattr(source, "content_type", None) or "text/plain"
    size = getattr(source, "size", None)
    if isinstance(size, int) and size > max_bytes:
        raise _too_large(str(name), size, max_bytes)
    read = getattr(source, "read", None)
    if not callable(read):
        raise ReadError(f"{type(source).__name__} has no read()")
    data = read()
    if inspect.isawaitable(data):
        data = await data
    if isinstance(data, str):
        data = data.encode("utf-8")
    elif isinstance(data, bytearray):
        data = bytes(data)
    elif not isinstance(data, bytes):
        raise ReadError(f"read() of {name or type(source).__name__} returned {type(data).__name__}, not text or bytes")
    return str(name), size if isinstance(size, int) else len(data), media_type, data


async def parse_file(
    source: ImportSource,
    max_bytes: int = MAX_IMPORT_BYTES,
    excerpt_max_length: int = EXCERPT_MAX_LENGTH,
    title_max_length: int = TITLE_MAX_LENGTH,
    ) -> ImportResult:
    """Read an uploaded file as UTF-8 text and parse it into an ImportResult.

    Raises ReadError if the file cannot be read, is larger than max_bytes or is
    not valid UTF-8; ParseError if detection, conversion or extraction fails.
    """
    try:
        name, size, media_type, data = await _read_bytes(source, max_bytes)
    except ReadError:
        raise
    except Exception as e:
        raise ReadError(f"Failed to read file: {e}") from e

    if size > max_bytes or len(data) > max_bytes:
        raise _too_large(name, max(size, len(data)), max_bytes)
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ReadError(f"Failed to read file {name}: not valid UTF-8 text") from e

    result = parse_text(name, text, excerpt_max_length, title_max_length)
    LOGGER.info("imported file name=%s size=%s detected=%s", name, size, result.metadata["detected_format"])
    return result.model_copy(update={"metadata": {**result.metadata, "source_size": size, "media_type": media_type}})
