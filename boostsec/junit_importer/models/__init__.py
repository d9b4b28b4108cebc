"""Data models for parsed test cases, executions, configuration and results."""

from boostsec.junit_importer.models.config import (
    AquaConfig,
    BehaviorConfig,
    HttpConfig,
    ImporterConfig,
    InputConfig,
    LoggingConfig,
    MappingConfig,
    MappingStrategy,
    RunConfig,
)
from boostsec.junit_importer.models.execution import (
    ExecutionPayload,
    ExecutionRequest,
    SubmitResult,
)
from boostsec.junit_importer.models.summary import ExitCode, RunSummary
from boostsec.junit_importer.models.test_case import Outcome, TestCaseResult

__all__ = [
    "AquaConfig",
    "BehaviorConfig",
    "ExecutionPayload",
    "ExecutionRequest",
    "ExitCode",
    "HttpConfig",
    "ImporterConfig",
    "InputConfig",
    "LoggingConfig",
    "MappingConfig",
    "MappingStrategy",
    "Outcome",
    "RunConfig",
    "RunSummary",
    "SubmitResult",
    "TestCaseResult",
]
