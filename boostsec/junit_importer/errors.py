"""Errors raised while importing test results."""

from pathlib import Path


class ImporterError(Exception):
    """Base class for importer errors."""


class ConfigurationError(ImporterError):
    """Invalid or incomplete configuration detected at startup."""


class ParseError(ImporterError):
    """A report file could not be read or is not well-formed XML."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        """Initialize with the offending file path."""
        self.path = Path(path)
        message = f"Failed to parse JUnit XML at path: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnmappedIdentifierError(ImporterError):
    """A test case has no usable IDs and fail-on-unmapped is enabled."""

    def __init__(
        self,
        class_name: str,
        name: str,
        scenario_id: int | None,
        case_id: int | None,
    ) -> None:
        """Initialize with the test case and the IDs that were resolved."""
        self.class_name = class_name
        self.name = name
        self.scenario_id = scenario_id
        self.case_id = case_id
        super().__init__(
            f"Unmapped IDs for {class_name}.{name} "
            f"(scenario_id={scenario_id}, case_id={case_id})"
        )


class AuthenticationError(ImporterError):
    """Bearer token could not be obtained. Never retried."""


class SubmissionError(ImporterError):
    """A submission attempt was rejected."""

    def __init__(self, message: str, status: int | None = None) -> None:
        """Initialize with the HTTP status, when there is one."""
        self.status = status
        super().__init__(message)


class TransientSubmissionError(SubmissionError):
    """Rate limit, server error or timeout. Eligible for retry."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        """Initialize with the server-provided retry delay in seconds."""
        super().__init__(message, status)
        self.retry_after = retry_after


class TerminalSubmissionError(SubmissionError):
    """Any other non-2xx response. Not retried."""
