"""Import pipeline: discover, parse, map, group and submit test results."""

import logging
from pathlib import Path

from boostsec.junit_importer.aggregator import ScenarioAggregator
from boostsec.junit_importer.clients.base import ExecutionClient
from boostsec.junit_importer.counters import Counter, ImportCounters
from boostsec.junit_importer.discovery import discover_inputs
from boostsec.junit_importer.errors import (
    AuthenticationError,
    ParseError,
    UnmappedIdentifierError,
)
from boostsec.junit_importer.models.config import ImporterConfig
from boostsec.junit_importer.models.execution import ExecutionRequest
from boostsec.junit_importer.models.summary import ExitCode, RunSummary
from boostsec.junit_importer.parser import parse_report
from boostsec.junit_importer.resolvers import ResolverPair, build_resolvers

logger = logging.getLogger(__name__)


class Importer:
    """Runs one import: files and scenario groups are handled sequentially."""

    def __init__(
        self,
        config: ImporterConfig,
        client: ExecutionClient | None = None,
        counters: ImportCounters | None = None,
        resolvers: ResolverPair | None = None,
    ) -> None:
        """Initialize importer.

        Args:
            config: Validated importer configuration
            client: Submission client, may be None for dry runs
            counters: Run counters (default: fresh in-process counters)
            resolvers: ID resolvers (default: built from ``config.mapping``)

        """
        if client is None and not config.behavior.dry_run:
            raise ValueError("A submission client is required unless dry-run is set")

        self.config = config
        self.client = client
        self.counters = counters or ImportCounters()
        self.resolvers = resolvers or build_resolvers(config.mapping)

    async def run(self) -> RunSummary:
        """Run the import and derive its exit code.

        Returns:
            Summary of the run, including the exit code

        """
        logger.info("Importer: Discovering input files...")
        files = await discover_inputs(self.config.input)

        aggregator = ScenarioAggregator(
            self.resolvers,
            self.config.behavior,
            self.config.run,
            self.config.aqua,
            self.counters,
        )
        summary = RunSummary(dry_run=self.config.behavior.dry_run)

        aborted = await self._aggregate(files, aggregator, summary)
        summary.mapped = aggregator.mapped
        summary.skipped_unmapped = aggregator.skipped_unmapped
        summary.scenario_groups = len(aggregator.groups)
        if aborted:
            return summary

        if self.config.behavior.dry_run:
            logger.info(
                f"Dry-run enabled: would submit {len(aggregator.groups)} scenario "
                f"group(s), {aggregator.execution_count} execution(s). "
                "No network calls performed."
            )
        else:
            try:
                await self._submit_groups(aggregator.groups, summary)
            except AuthenticationError as e:
                logger.error(f"Authentication failed: {e}")
                summary.exit_code = ExitCode.FATAL
                summary.message = str(e)
                return summary

        summary.exit_code = _final_exit_code(summary)
        logger.info(
            f"Summary: files={summary.files}, parsed={summary.parsed}, "
            f"mapped={summary.mapped}, skipped-unmapped={summary.skipped_unmapped}, "
            f"posted={summary.posted}, failed={summary.failed}"
        )
        return summary

    async def _aggregate(
        self,
        files: list[Path],
        aggregator: ScenarioAggregator,
        summary: RunSummary,
    ) -> bool:
        """Parse and map every file. Returns True if the run was aborted."""
        for file in files:
            summary.files += 1
            self.counters.add(Counter.FILES_PROCESSED)

            try:
                results = await parse_report(file)
            except ParseError as e:
                logger.error(f"Error parsing file: {file}", exc_info=e)
                summary.exit_code = ExitCode.INPUT_ERROR
                summary.message = str(e)
                return True

            summary.parsed += len(results)
            self.counters.add(Counter.TEST_CASES_PARSED, len(results))
            logger.info(f"Parsed {len(results)} test case(s) from {file}")

            try:
                aggregator.add_results(results)
            except UnmappedIdentifierError as e:
                summary.exit_code = ExitCode.INPUT_ERROR
                summary.message = str(e)
                return True

        return False

    async def _submit_groups(
        self,
        groups: dict[int, list[ExecutionRequest]],
        summary: RunSummary,
    ) -> None:
        """Submit each scenario group in first-seen order."""
        if self.client is None:
            raise RuntimeError("No submission client configured")

        for scenario_id, executions in groups.items():
            logger.info(
                f"Submitting {len(executions)} execution(s) for scenario {scenario_id}"
            )
            result = await self.client.submit_executions(executions)

            summary.posted += result.posted
            summary.failed += result.failed
            self.counters.add(Counter.EXECUTIONS_POSTED, result.posted)
            self.counters.add(Counter.EXECUTIONS_FAILED, result.failed)

            if not result.success:
                logger.error(
                    f"Submission failed for scenario {scenario_id}: "
                    f"{result.error_message}"
                )


def _final_exit_code(summary: RunSummary) -> ExitCode:
    if summary.failed > 0:
        return ExitCode.SUBMISSION_FAILED
    if summary.skipped_unmapped > 0:
        return ExitCode.INPUT_ERROR
    return ExitCode.SUCCESS
