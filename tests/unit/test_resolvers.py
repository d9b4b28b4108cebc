"""Tests for test case and scenario ID resolvers."""

import pytest

from boostsec.junit_importer.models.config import MappingConfig, MappingStrategy
from boostsec.junit_importer.resolvers import (
    PrefixSuffixCaseIdResolver,
    RegexCaseIdResolver,
    StrictCaseIdResolver,
    StrictScenarioIdResolver,
    build_resolvers,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TC123", 123),
        ("TC-123", 123),
        ("[TC:123]", 123),
        ("MyTest TC 123", 123),
        ("prefix tc-42 suffix", 42),
        ("Suite.test_login_TC7", None),
    ],
)
def test_regex_resolver_valid_patterns(text: str, expected: int | None) -> None:
    """Default resolver finds TC IDs with optional separators in any case."""
    assert RegexCaseIdResolver().resolve(text) == expected


@pytest.mark.parametrize(
    "text", [None, "", "   ", "no id here", "TC0", "TC000", "TC99999999999"]
)
def test_regex_resolver_invalid_patterns(text: str | None) -> None:
    """Default resolver rejects missing, zero and overlong IDs."""
    assert RegexCaseIdResolver().resolve(text) is None


def test_regex_resolver_rejects_values_above_int32() -> None:
    """Ten-digit IDs above the 32-bit range are rejected."""
    assert RegexCaseIdResolver().resolve("TC4294967295") is None
    assert RegexCaseIdResolver().resolve("TC2147483647") == 2147483647


def test_regex_resolver_custom_pattern() -> None:
    """A custom pattern reads the ID from its first group."""
    resolver = RegexCaseIdResolver(r"CASE#(\d+)")

    assert resolver.resolve("login works case#55") == 55
    assert resolver.resolve("TC55") is None


def test_regex_resolver_custom_pattern_without_group() -> None:
    """A custom pattern without a capture group never resolves."""
    assert RegexCaseIdResolver(r"TC\d+").resolve("TC55") is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TC123", 123),
        ("tc-987", 987),
        ("TC:42", 42),
        ("prefix TC 5 suffix", 5),
    ],
)
def test_prefix_suffix_default_prefix(text: str, expected: int) -> None:
    """Prefix-suffix resolver defaults to the TC prefix."""
    assert PrefixSuffixCaseIdResolver().resolve(text) == expected


def test_prefix_suffix_custom_prefix_exact_length() -> None:
    """A custom prefix with exact digit count accepts leading zeros."""
    resolver = PrefixSuffixCaseIdResolver(prefix="CASE", digits_length=5)

    assert resolver.resolve("start CASE-01234 end") == 1234
    assert resolver.resolve("CASE 99999") == 99999
    assert resolver.resolve("case:00001") == 1


def test_prefix_suffix_wrong_length() -> None:
    """Digit runs of another length are rejected."""
    resolver = PrefixSuffixCaseIdResolver(prefix="CASE", digits_length=5)

    assert resolver.resolve("CASE 1234") is None
    assert resolver.resolve("CASE 123456") is None


@pytest.mark.parametrize(
    "text", ["", "no match here", "TC 0", "TC : - ", "TC 123456789012"]
)
def test_prefix_suffix_invalid(text: str) -> None:
    """Prefix-suffix resolver rejects zero, missing and overlong IDs."""
    assert PrefixSuffixCaseIdResolver().resolve(text) is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TS000000 scenario name", 0),
        ("[TS123456] Something", 123456),
        ("prefixTS654321suffix", 654321),
        ("Class.Method TS000001 TC000002", 1),
        ("TS1234567 in name", 1234567),
        ("edge TS0000000", 0),
    ],
)
def test_strict_scenario_valid(text: str, expected: int) -> None:
    """Strict scenario resolver accepts six or seven digits, zero included."""
    assert StrictScenarioIdResolver().resolve(text) == expected


@pytest.mark.parametrize(
    "text", ["", "NoTSHere", "TS12345", "TS12345678", "XTS123456"]
)
def test_strict_scenario_invalid(text: str) -> None:
    """Strict scenario resolver rejects other lengths and glued uppercase."""
    assert StrictScenarioIdResolver().resolve(text) is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("TC000000", 0),
        ("[TC123456]", 123456),
        ("xTC654321y", 654321),
        ("Param name TC000042", 42),
    ],
)
def test_strict_case_valid(text: str, expected: int) -> None:
    """Strict case resolver requires exactly six digits."""
    assert StrictCaseIdResolver().resolve(text) == expected


@pytest.mark.parametrize("text", ["TC-42", "TC12345", "TC1234567", "no id"])
def test_strict_case_invalid(text: str) -> None:
    """Strict case resolver rejects separators and other lengths."""
    assert StrictCaseIdResolver().resolve(text) is None


def test_build_resolvers_per_strategy() -> None:
    """build_resolvers picks the case resolver for the strategy."""
    regex = build_resolvers(MappingConfig())
    prefix = build_resolvers(
        MappingConfig(strategy=MappingStrategy.PREFIX_SUFFIX, prefix="CASE")
    )
    strict = build_resolvers(MappingConfig(strategy=MappingStrategy.STRICT_TS_TC))

    assert isinstance(regex.case, RegexCaseIdResolver)
    assert isinstance(prefix.case, PrefixSuffixCaseIdResolver)
    assert prefix.case.prefix == "CASE"
    assert isinstance(strict.case, StrictCaseIdResolver)
    for pair in (regex, prefix, strict):
        assert isinstance(pair.scenario, StrictScenarioIdResolver)


def test_build_resolvers_custom_regex() -> None:
    """The regex strategy uses the configured pattern."""
    pair = build_resolvers(MappingConfig(pattern=r"ID=(\d+)"))

    assert pair.case.resolve("test ID=9") == 9
