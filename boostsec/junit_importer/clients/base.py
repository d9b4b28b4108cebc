"""Abstract base class for execution submission clients."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from boostsec.junit_importer.errors import (
    TerminalSubmissionError,
    TransientSubmissionError,
)
from boostsec.junit_importer.models.execution import (
    ExecutionPayload,
    ExecutionRequest,
    SubmitResult,
)

logger = logging.getLogger(__name__)

MAX_BACKOFF_SECONDS = 30.0


class ExecutionClient(ABC):
    """Submits scenario batches with authentication and bounded retries."""

    def __init__(self, retries: int = 3) -> None:
        """Initialize with the maximum number of attempts per batch."""
        self.attempts = max(1, retries)

    @abstractmethod
    async def ensure_authenticated(self) -> None:
        """Obtain credentials for subsequent posts, once per client.

        Raises:
            AuthenticationError: If credentials are missing or rejected

        """

    @abstractmethod
    async def post_executions(self, payload: list[dict[str, object]]) -> None:
        """Post one serialized batch.

        Args:
            payload: Wire objects, one per execution

        Raises:
            TransientSubmissionError: On rate limiting, server errors or timeout
            TerminalSubmissionError: On any other rejection

        """

    async def submit_executions(
        self, executions: Sequence[ExecutionRequest]
    ) -> SubmitResult:
        """Submit a batch of executions in a single call, retrying if transient.

        The batch is all-or-nothing: a failure marks every execution failed.

        Args:
            executions: Executions of one scenario, in submission order

        Returns:
            Counts of posted and failed executions

        Raises:
            AuthenticationError: If no bearer token can be obtained

        """
        count = len(executions)
        if count == 0:
            return SubmitResult(success=True, posted=0, failed=0)

        await self.ensure_authenticated()
        payload = build_payload(executions)

        for attempt in range(1, self.attempts + 1):
            try:
                await self.post_executions(payload)
            except TransientSubmissionError as e:
                logger.warning(
                    f"Transient error when posting executions "
                    f"(attempt {attempt}/{self.attempts}): {e}"
                )
                if attempt == self.attempts:
                    return _failed(count, str(e))
                await asyncio.sleep(backoff_delay(attempt, e.retry_after))
                continue
            except TerminalSubmissionError as e:
                logger.error(f"Failed to post executions: {e}")
                return _failed(count, str(e))

            logger.info(f"Submitted {count} execution(s)")
            return SubmitResult(success=True, posted=count, failed=0)

        return _failed(count, "Unknown error")  # pragma: no cover


def build_payload(executions: Sequence[ExecutionRequest]) -> list[dict[str, object]]:
    """Serialize executions, numbering them 1..N within this batch."""
    return [
        ExecutionPayload.from_request(execution, position).to_wire()
        for position, execution in enumerate(executions, start=1)
    ]


def backoff_delay(attempt: int, retry_after: float | None = None) -> float:
    """Seconds to wait before the attempt following ``attempt``.

    A positive server-provided ``retry_after`` wins, otherwise the delay
    doubles from one second up to 30 seconds.
    """
    if retry_after is not None and retry_after > 0:
        return retry_after
    return min(MAX_BACKOFF_SECONDS, 2.0 ** (attempt - 1))


def _failed(count: int, message: str) -> SubmitResult:
    return SubmitResult(success=False, posted=0, failed=count, error_message=message)
