"""Tests for importer configuration models."""

import pytest
from pydantic import ValidationError

from boostsec.junit_importer.models.config import (
    AquaConfig,
    BehaviorConfig,
    HttpConfig,
    ImporterConfig,
    MappingStrategy,
    is_https_url,
)


def _aqua(**overrides: object) -> AquaConfig:
    values: dict[str, object] = {
        "base_url": "https://aqua.example.com",
        "username": "bot",
        "password": "secret",
    }
    values.update(overrides)
    return AquaConfig.model_validate(values)


def test_defaults() -> None:
    """Defaults match the documented behaviour."""
    config = ImporterConfig(aqua=_aqua())

    assert config.http.timeout_seconds == 100
    assert config.http.retries == 3
    assert config.mapping.strategy is MappingStrategy.REGEX
    assert config.behavior.skip_unmapped is True
    assert config.behavior.fail_on_unmapped is False
    assert config.behavior.dry_run is False
    assert config.input.search_pattern == "*.xml"
    assert config.input.recursive is True
    assert config.logging.level == "INFO"


def test_requires_connection_settings() -> None:
    """All missing connection settings are reported together."""
    with pytest.raises(ValidationError) as e:
        ImporterConfig()

    message = str(e.value)
    assert "aqua.base_url is required" in message
    assert "aqua.username is required" in message
    assert "aqua.password is required" in message


def test_rejects_http_url() -> None:
    """Plain HTTP base URLs are rejected."""
    with pytest.raises(ValidationError, match="must be a valid HTTPS URL"):
        ImporterConfig(aqua=_aqua(base_url="http://aqua.example.com"))


def test_dry_run_skips_connection_checks() -> None:
    """Dry runs need no connection settings."""
    config = ImporterConfig(behavior=BehaviorConfig(dry_run=True))

    assert config.aqua.base_url is None


@pytest.mark.parametrize(
    ("field", "value"), [("timeout_seconds", 0), ("retries", 0), ("retries", -1)]
)
def test_http_config_positive(field: str, value: int) -> None:
    """Timeout and retries must be positive."""
    with pytest.raises(ValidationError):
        HttpConfig.model_validate({field: value})


def test_project_id_positive() -> None:
    """Project IDs must be positive."""
    with pytest.raises(ValidationError):
        _aqua(project_id=0)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://aqua.example.com", True),
        ("https://aqua.example.com/aquaWebNG/", True),
        ("http://aqua.example.com", False),
        ("https://", False),
        ("aqua.example.com", False),
    ],
)
def test_is_https_url(url: str, expected: bool) -> None:
    """Only absolute https URLs with a host are accepted."""
    assert is_https_url(url) is expected
