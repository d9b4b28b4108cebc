"""Streaming parser for JUnit XML reports.

Supports the common variants produced by Maven Surefire, the JUnit Platform
console launcher, pytest and similar runners.
"""

import asyncio
import locale
import logging
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path
from xml.etree.ElementTree import Element, XMLPullParser
from xml.etree.ElementTree import ParseError as XmlParseError

from boostsec.junit_importer.errors import ParseError
from boostsec.junit_importer.models.test_case import Outcome, TestCaseResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

SUITE_TAGS = frozenset({"testsuite", "suite"})
ISSUE_OUTCOMES = {
    "failure": Outcome.FAILED,
    "error": Outcome.ERROR,
    "skipped": Outcome.SKIPPED,
    "ignored": Outcome.SKIPPED,
}


async def parse_report(path: Path) -> list[TestCaseResult]:
    """Parse a JUnit XML report into test case results.

    The file is fed to the XML parser in chunks so large reports are never
    held in memory as a whole.

    Args:
        path: Path to the report file

    Returns:
        Test case results in document order

    Raises:
        ParseError: If the file cannot be read or is not well-formed XML

    """
    reader = _ReportReader()
    try:
        with path.open("rb") as handle:
            while True:
                chunk = await asyncio.to_thread(handle.read, CHUNK_SIZE)
                if not chunk:
                    break
                reader.feed(chunk)
            reader.close()
    except (OSError, XmlParseError, UnicodeDecodeError, ValueError) as e:
        raise ParseError(path, str(e)) from e

    logger.debug(f"Parsed {len(reader.results)} test case(s) from {path}")
    return reader.results


class _ReportReader:
    """Turns pull-parser events into test case results."""

    def __init__(self) -> None:
        self._parser = XMLPullParser(events=("start", "end"))
        self._suite_timestamp: datetime | None = None
        self.results: list[TestCaseResult] = []

    def feed(self, data: bytes) -> None:
        self._parser.feed(data)
        self._drain()

    def close(self) -> None:
        self._parser.close()
        self._drain()

    def _drain(self) -> None:
        for event, element in self._parser.read_events():
            tag = _local_name(element.tag)
            if event == "start":
                if tag in SUITE_TAGS:
                    self._suite_timestamp = parse_timestamp(element.get("timestamp"))
                continue

            if tag == "testcase":
                result = self._read_test_case(element)
                if result is not None:
                    self.results.append(result)
                element.clear()
            elif tag in SUITE_TAGS:
                element.clear()

    def _read_test_case(self, element: Element) -> TestCaseResult | None:
        # The whole <testcase> subtree is complete once its end event fires.
        class_name = element.get("classname") or element.get("class") or ""
        name = element.get("name") or ""
        duration = parse_duration_seconds(element.get("time"))

        outcome = Outcome.PASSED
        message: str | None = None
        details: str | None = None
        properties: dict[str, str] = {}

        for child in element:
            child_tag = _local_name(child.tag)
            if child_tag in ISSUE_OUTCOMES:
                outcome = ISSUE_OUTCOMES[child_tag]
                message = child.get("message")
                details = None
                if outcome is not Outcome.SKIPPED:
                    text = "".join(child.itertext())
                    details = text or None
            elif child_tag == "properties":
                properties.update(_read_properties(child))

        if not name.strip():
            return None

        started_at = self._suite_timestamp
        finished_at = None
        if started_at is not None and duration is not None:
            finished_at = started_at + timedelta(seconds=duration)

        return TestCaseResult(
            class_name=class_name,
            name=name,
            duration_seconds=duration,
            outcome=outcome,
            started_at=started_at,
            finished_at=finished_at,
            error_message=message,
            error_details=details,
            properties=properties,
        )


def _read_properties(element: Element) -> dict[str, str]:
    properties: dict[str, str] = {}
    for prop in element:
        if _local_name(prop.tag) != "property":
            continue
        name = prop.get("name")
        if name:
            properties[name] = prop.get("value") or ""
    return properties


def _local_name(tag: str) -> str:
    """Strip an XML namespace from ``tag``."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def parse_duration_seconds(raw: str | None) -> float | None:
    """Parse a ``time`` attribute into seconds.

    Tries the invariant format first, then a decimal comma, then the active
    locale. Negative or non-finite values are treated as unknown.
    """
    if raw is None or not raw.strip():
        return None
    if "_" in raw:
        # Digit separators are not part of any report format
        return None

    candidates = (
        lambda: float(raw),
        lambda: float(raw.replace(",", ".")),
        lambda: locale.atof(raw),
    )
    for candidate in candidates:
        try:
            seconds = candidate()
        except ValueError:
            continue
        if math.isfinite(seconds) and seconds >= 0:
            return seconds
        return None
    return None


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse a suite ``timestamp`` attribute as a UTC datetime.

    Values without an offset are assumed to be UTC.
    """
    if raw is None or not raw.strip():
        return None

    value = raw.strip()
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring unparseable suite timestamp: {raw!r}")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
