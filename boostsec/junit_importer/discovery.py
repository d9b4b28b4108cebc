"""Discover JUnit XML report files to import."""

import asyncio
import fnmatch
import logging
import sys
import tempfile
from pathlib import Path
from typing import TextIO

from boostsec.junit_importer.models.config import InputConfig

logger = logging.getLogger(__name__)


async def discover_inputs(
    config: InputConfig, stdin: TextIO | None = None
) -> list[Path]:
    """Discover report files from configured paths or stdin.

    Args:
        config: Input configuration
        stdin: Stream used when reading from stdin (default: sys.stdin)

    Returns:
        Absolute file paths, de-duplicated, in discovery order

    """
    pattern = config.search_pattern or "*"
    discovered: dict[Path, None] = {}

    if config.paths:
        for raw in config.paths:
            if not raw or not raw.strip():
                continue
            path = Path(raw).expanduser().resolve()

            if path.is_file():
                if matches_pattern(path.name, pattern):
                    discovered[path] = None
                else:
                    logger.debug(
                        f"File '{path}' ignored due to search pattern '{pattern}'"
                    )
            elif path.is_dir():
                for file in _enumerate_files(path, pattern, config.recursive):
                    discovered[file] = None
            else:
                logger.warning(f"Input path not found: {path}")
    elif config.read_from_stdin:
        captured = await _capture_stdin(stdin or sys.stdin)
        if captured is not None:
            discovered[captured] = None

    files = list(discovered)
    logger.info(
        f"Discovered {len(files)} input file(s) with pattern '{pattern}' "
        f"(recursive={config.recursive})"
    )
    return files


def matches_pattern(file_name: str, pattern: str) -> bool:
    """Case-insensitive glob match on a file name."""
    if not pattern or pattern == "*":
        return True
    return fnmatch.fnmatch(file_name.lower(), pattern.lower())


def _enumerate_files(directory: Path, pattern: str, recursive: bool) -> list[Path]:
    candidates = directory.rglob("*") if recursive else directory.glob("*")
    return sorted(
        candidate.resolve()
        for candidate in candidates
        if candidate.is_file() and matches_pattern(candidate.name, pattern)
    )


async def _capture_stdin(stream: TextIO) -> Path | None:
    """Write stdin content to a temp file so it can be parsed like any input."""
    if stream.isatty():
        logger.warning("Reading from stdin enabled but stdin is not redirected")
        return None

    content = await asyncio.to_thread(stream.read)
    if not content.strip():
        logger.warning("Stdin was empty; no inputs discovered")
        return None

    with tempfile.NamedTemporaryFile(
        "w", suffix=".xml", delete=False, encoding="utf-8"
    ) as handle:
        handle.write(content)

    path = Path(handle.name).resolve()
    logger.info(f"Captured stdin into temp file: {path}")
    return path
