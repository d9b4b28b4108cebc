"""Resolve numeric test case and scenario IDs from test names."""

import re
from abc import ABC, abstractmethod
from typing import NamedTuple

from boostsec.junit_importer.models.config import MappingConfig, MappingStrategy

INT32_MAX = 2**31 - 1
MAX_DIGITS = 10

DEFAULT_CASE_PATTERN = r"(?:^|\b|\[)TC[:\-\s]?([0-9]{1,10})(?:\b|\])"
STRICT_CASE_PATTERN = r"(?<![A-Z0-9])TC([0-9]{6})(?![0-9])"
STRICT_SCENARIO_PATTERN = r"(?<![A-Z0-9])TS([0-9]{6,7})(?![0-9])"

SEPARATORS = frozenset(":-")


class IdResolver(ABC):
    """Maps free text to a numeric identifier."""

    @abstractmethod
    def resolve(self, text: str | None) -> int | None:
        """Return the identifier found in ``text``, or None.

        Args:
            text: Test name or ``classname.name`` context

        Returns:
            Numeric identifier, or None when nothing valid is found

        """


class _PatternResolver(IdResolver):
    """Resolver driven by a regex whose first group holds the digits."""

    def __init__(
        self, pattern: str, minimum: int, maximum: int, flags: int = 0
    ) -> None:
        self.pattern = re.compile(pattern, flags)
        self.minimum = minimum
        self.maximum = maximum

    def resolve(self, text: str | None) -> int | None:
        if text is None or not text.strip():
            return None

        match = self.pattern.search(text)
        if match is None or self.pattern.groups < 1:
            return None

        digits = match.group(1)
        if not digits or not digits.isascii() or not digits.isdigit():
            return None

        value = int(digits)
        if self.minimum <= value <= self.maximum:
            return value
        return None


class RegexCaseIdResolver(_PatternResolver):
    """Default case resolver: ``TC`` plus 1-10 digits, positive values only.

    Accepts ``TC123``, ``TC-123``, ``[TC:123]`` and ``TC 123`` in any case.
    """

    def __init__(self, pattern: str | None = None) -> None:
        """Initialize with an optional custom pattern."""
        super().__init__(
            pattern or DEFAULT_CASE_PATTERN,
            minimum=1,
            maximum=INT32_MAX,
            flags=re.IGNORECASE,
        )


class StrictCaseIdResolver(_PatternResolver):
    """``TC`` followed by exactly six digits, zero allowed."""

    def __init__(self, pattern: str | None = None) -> None:
        """Initialize with an optional custom pattern."""
        super().__init__(pattern or STRICT_CASE_PATTERN, minimum=0, maximum=999_999)


class StrictScenarioIdResolver(_PatternResolver):
    """``TS`` followed by six or seven digits, zero allowed."""

    def __init__(self, pattern: str | None = None) -> None:
        """Initialize with an optional custom pattern."""
        super().__init__(
            pattern or STRICT_SCENARIO_PATTERN, minimum=0, maximum=9_999_999
        )


class PrefixSuffixCaseIdResolver(IdResolver):
    """Finds a configured prefix followed by optional separators and digits.

    The prefix is searched case-insensitively anywhere in the text. Separators
    ``:``, ``-`` and whitespace between prefix and digits are skipped. When
    ``digits_length`` is set the digit run must have exactly that length.
    """

    def __init__(
        self, prefix: str | None = None, digits_length: int | None = None
    ) -> None:
        """Initialize with prefix (default ``TC``) and exact digit count."""
        self.prefix = prefix if prefix is not None else "TC"
        self.digits_length = digits_length
        self._prefix_pattern = re.compile(re.escape(self.prefix), re.IGNORECASE)

    def resolve(self, text: str | None) -> int | None:
        """Return the positive ID after the first prefix occurrence."""
        if text is None or not text.strip():
            return None

        found = self._prefix_pattern.search(text)
        if found is None:
            return None

        i = found.end()
        while i < len(text) and (text[i] in SEPARATORS or text[i].isspace()):
            i += 1

        start = i
        while i < len(text) and "0" <= text[i] <= "9":
            i += 1

        length = i - start
        if length == 0:
            return None
        if self.digits_length is not None and length != self.digits_length:
            return None
        if length > MAX_DIGITS:
            return None

        value = int(text[start:i])
        if 0 < value <= INT32_MAX:
            return value
        return None


class ResolverPair(NamedTuple):
    """Scenario and case resolvers active for a run."""

    scenario: IdResolver
    case: IdResolver


def build_resolvers(mapping: MappingConfig) -> ResolverPair:
    """Build the resolvers for the configured strategy.

    Scenario IDs always use the strict ``TS`` resolver.

    Args:
        mapping: Mapping configuration

    Returns:
        Scenario and case resolvers

    """
    scenario = StrictScenarioIdResolver()

    if mapping.strategy is MappingStrategy.PREFIX_SUFFIX:
        case: IdResolver = PrefixSuffixCaseIdResolver(
            mapping.prefix, mapping.digits_length
        )
    elif mapping.strategy is MappingStrategy.STRICT_TS_TC:
        case = StrictCaseIdResolver()
    else:
        case = RegexCaseIdResolver(mapping.pattern)

    return ResolverPair(scenario=scenario, case=case)
