"""Configuration models for the importer."""

from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, Field, model_validator


class MappingStrategy(str, Enum):
    """Identifier resolution strategy, chosen once per run."""

    REGEX = "regex"
    PREFIX_SUFFIX = "prefix-suffix"
    STRICT_TS_TC = "strict-ts-tc"


class AquaConfig(BaseModel):
    """Connection settings for the aqua test-management service."""

    base_url: str | None = Field(default=None, description="HTTPS base URL")
    username: str | None = Field(default=None, description="API username")
    password: str | None = Field(default=None, description="API password")
    project_id: int | None = Field(
        default=None, gt=0, description="Project ID copied onto every execution"
    )


class HttpConfig(BaseModel):
    """HTTP behaviour of the submission client."""

    timeout_seconds: int = Field(default=100, gt=0, description="Request timeout")
    retries: int = Field(
        default=3, gt=0, description="Attempts for transient errors (5xx/429)"
    )


class MappingConfig(BaseModel):
    """How test case identifiers are resolved from test names."""

    strategy: MappingStrategy = Field(default=MappingStrategy.REGEX)
    pattern: str | None = Field(
        default=None, description="Custom regex, first group holds the ID"
    )
    prefix: str | None = Field(
        default=None, description="Prefix for the prefix-suffix strategy"
    )
    digits_length: int | None = Field(
        default=None, gt=0, description="Exact digit count for prefix-suffix"
    )


class BehaviorConfig(BaseModel):
    """Flow decisions for unmapped test cases and network submission."""

    skip_unmapped: bool = Field(default=True)
    fail_on_unmapped: bool = Field(default=False)
    dry_run: bool = Field(
        default=False, description="Log what would be sent, skip all network calls"
    )


class InputConfig(BaseModel):
    """Where JUnit XML reports are discovered."""

    paths: list[str] = Field(default_factory=list, description="Files or folders")
    search_pattern: str = Field(default="*.xml", description="File name glob")
    recursive: bool = Field(default=True, description="Recurse into subfolders")
    read_from_stdin: bool = Field(
        default=False, description="Read a report from stdin when no paths given"
    )


class RunConfig(BaseModel):
    """Run-level metadata copied onto every execution."""

    name: str | None = Field(default=None, description="Friendly run name")
    external_run_id: str | None = Field(
        default=None, description="CI run identifier"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Minimum log level")


class ImporterConfig(BaseModel):
    """Complete importer configuration."""

    aqua: AquaConfig = Field(default_factory=AquaConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    behavior: BehaviorConfig = Field(default_factory=BehaviorConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def _check_connection(self) -> "ImporterConfig":
        """Require connection settings unless running dry."""
        if self.behavior.dry_run:
            return self

        errors: list[str] = []
        if not self.aqua.base_url or not self.aqua.base_url.strip():
            errors.append("aqua.base_url is required when not running in dry-run mode")
        elif not is_https_url(self.aqua.base_url):
            errors.append("aqua.base_url must be a valid HTTPS URL")

        if not self.aqua.username or not self.aqua.username.strip():
            errors.append("aqua.username is required when not running in dry-run mode")

        if not self.aqua.password or not self.aqua.password.strip():
            errors.append("aqua.password is required when not running in dry-run mode")

        if errors:
            raise ValueError("; ".join(errors))
        return self


def is_https_url(url: str) -> bool:
    """Check that ``url`` is an absolute https URL with a host."""
    parsed = urlparse(url.strip())
    return parsed.scheme == "https" and bool(parsed.netloc)
