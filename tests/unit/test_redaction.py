"""Tests for secret redaction in logs."""

import logging

import pytest

from boostsec.junit_importer.redaction import RedactingFilter, redact


def test_redact_masks_common_secrets() -> None:
    """redact masks usernames, passwords, tokens and bearer values."""
    text = "username: alice password=secret token: abc123 Authorization: Bearer xyz"

    redacted = redact(text)

    assert "username: <redacted>" in redacted
    assert "password: <redacted>" in redacted
    assert "token: <redacted>" in redacted
    assert "Authorization: Bearer <redacted>" in redacted
    for secret in ("alice", "secret", "abc123", "xyz"):
        assert secret not in redacted


def test_redact_leaves_plain_text() -> None:
    """Text without secrets is unchanged."""
    assert redact("Submitted 3 execution(s)") == "Submitted 3 execution(s)"
    assert redact(None) == ""


def test_redacting_filter_rewrites_record(caplog: pytest.LogCaptureFixture) -> None:
    """RedactingFilter masks formatted arguments and keeps the record."""
    logger = logging.getLogger("tests.redaction")
    logger.addFilter(RedactingFilter())

    try:
        with caplog.at_level(logging.INFO, logger="tests.redaction"):
            logger.info("Login with password=%s", "hunter2")
            logger.info("Nothing to hide")
    finally:
        logger.filters.clear()

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["Login with password: <redacted>", "Nothing to hide"]
