"""Map parsed test cases to executions and group them by scenario."""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from boostsec.junit_importer.counters import Counter, ImportCounters
from boostsec.junit_importer.errors import UnmappedIdentifierError
from boostsec.junit_importer.models.config import (
    AquaConfig,
    BehaviorConfig,
    RunConfig,
)
from boostsec.junit_importer.models.execution import ExecutionRequest
from boostsec.junit_importer.models.test_case import Outcome, TestCaseResult
from boostsec.junit_importer.resolvers import IdResolver, ResolverPair

logger = logging.getLogger(__name__)

STATUS_BY_OUTCOME: dict[Outcome, str] = {
    Outcome.PASSED: "Pass",
    Outcome.FAILED: "Failed",
    Outcome.ERROR: "Incomplete",
    Outcome.SKIPPED: "NotRun",
}


def map_status(outcome: Outcome) -> str:
    """Map a test outcome to the execution status expected by aqua."""
    return STATUS_BY_OUTCOME.get(outcome, "Passed")


def to_milliseconds(seconds: float | None) -> int | None:
    """Convert seconds to milliseconds, rounding half away from zero."""
    if seconds is None:
        return None
    # Decimal(float) is exact, so ties are decided on the real product.
    return int(Decimal(seconds * 1000).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class ScenarioAggregator:
    """Builds per-scenario execution batches from parsed test cases.

    Groups keep the order in which scenarios were first seen, and each group
    keeps the order in which its test cases were added, across all files.
    """

    def __init__(
        self,
        resolvers: ResolverPair,
        behavior: BehaviorConfig,
        run: RunConfig,
        aqua: AquaConfig,
        counters: ImportCounters,
    ) -> None:
        """Initialize with resolvers, unmapped policy and run metadata."""
        self.resolvers = resolvers
        self.behavior = behavior
        self.run = run
        self.aqua = aqua
        self.counters = counters
        self.groups: dict[int, list[ExecutionRequest]] = {}
        self.mapped = 0
        self.skipped_unmapped = 0

    @property
    def execution_count(self) -> int:
        """Total number of executions across all groups."""
        return sum(len(group) for group in self.groups.values())

    def add_results(self, results: Iterable[TestCaseResult]) -> None:
        """Map and group every result of one file.

        Raises:
            UnmappedIdentifierError: If a result is unmapped and
                fail-on-unmapped applies

        """
        for result in results:
            execution = self.map_result(result)
            if execution is None:
                continue
            self.groups.setdefault(execution.scenario_id, []).append(execution)

    def map_result(self, result: TestCaseResult) -> ExecutionRequest | None:
        """Resolve IDs for ``result`` and build its execution request.

        Returns:
            The execution request, or None when the result is skipped as
            unmapped

        Raises:
            UnmappedIdentifierError: If the result is unmapped, skip-unmapped
                is off and fail-on-unmapped is on

        """
        name_context = result.name
        if result.class_name.strip():
            alt_context = f"{result.class_name}.{result.name}"
        else:
            alt_context = result.name

        contexts = (name_context, alt_context)
        scenario_id = _first_resolved(self.resolvers.scenario, *contexts)
        case_id = _first_resolved(self.resolvers.case, *contexts)

        if scenario_id is None or scenario_id < 0 or case_id is None or case_id <= 0:
            return self._handle_unmapped(result, scenario_id, case_id)

        self.mapped += 1
        self.counters.add(Counter.TEST_CASES_MAPPED)

        return ExecutionRequest(
            test_case_id=case_id,
            status=map_status(result.outcome),
            duration_ms=to_milliseconds(result.duration_seconds),
            started_at=result.started_at,
            finished_at=result.finished_at,
            error_message=result.error_message,
            error_details=result.error_details,
            external_run_id=self.run.external_run_id,
            run_name=self.run.name,
            project_id=self.aqua.project_id,
            scenario_id=scenario_id,
        )

    def _handle_unmapped(
        self,
        result: TestCaseResult,
        scenario_id: int | None,
        case_id: int | None,
    ) -> None:
        test_id = f"{result.class_name}.{result.name}"
        if self.behavior.skip_unmapped:
            logger.warning(
                f"Unmapped IDs skipped: {test_id} "
                f"(scenario_id={scenario_id}, case_id={case_id})"
            )
        elif self.behavior.fail_on_unmapped:
            logger.error(
                f"Unmapped IDs and fail-on-unmapped enabled: {test_id} "
                f"(scenario_id={scenario_id}, case_id={case_id})"
            )
            raise UnmappedIdentifierError(
                result.class_name, result.name, scenario_id, case_id
            )
        else:
            logger.warning(
                f"Unmapped IDs treated as skipped: {test_id} "
                f"(scenario_id={scenario_id}, case_id={case_id})"
            )

        self.skipped_unmapped += 1
        self.counters.add(Counter.TEST_CASES_SKIPPED_UNMAPPED)
        return None


def _first_resolved(resolver: IdResolver, *contexts: str) -> int | None:
    for context in contexts:
        value = resolver.resolve(context)
        if value is not None:
            return value
    return None
