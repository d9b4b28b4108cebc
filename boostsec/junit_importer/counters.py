"""Run counters passed through the import pipeline."""

from collections import Counter as _Tally
from enum import Enum


class Counter(str, Enum):
    """Names of the counters incremented during a run."""

    FILES_PROCESSED = "importer.files_processed"
    TEST_CASES_PARSED = "importer.test_cases_parsed"
    TEST_CASES_MAPPED = "importer.test_cases_mapped"
    TEST_CASES_SKIPPED_UNMAPPED = "importer.test_cases_skipped_unmapped"
    EXECUTIONS_POSTED = "aqua.executions_posted"
    EXECUTIONS_FAILED = "aqua.executions_failed"


class ImportCounters:
    """In-process counters, injected into the components that increment them.

    Subclass and override ``add`` to forward values to a metrics backend.
    """

    def __init__(self) -> None:
        """Initialize all counters at zero."""
        self._values: _Tally[Counter] = _Tally()

    def add(self, counter: Counter, amount: int = 1) -> None:
        """Increment ``counter`` by ``amount``."""
        self._values[counter] += amount

    def get(self, counter: Counter) -> int:
        """Return the current value of ``counter``."""
        return self._values[counter]

    def snapshot(self) -> dict[str, int]:
        """Return all counter values keyed by name."""
        return {counter.value: self._values[counter] for counter in Counter}
