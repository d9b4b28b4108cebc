"""Models for the outcome of an import run."""

from enum import IntEnum

from pydantic import BaseModel, Field


class ExitCode(IntEnum):
    """Process exit status of an import run."""

    SUCCESS = 0
    INPUT_ERROR = 2
    SUBMISSION_FAILED = 3
    FATAL = 4


class RunSummary(BaseModel):
    """Run-level counters and the derived exit code."""

    files: int = Field(default=0, description="Report files processed")
    parsed: int = Field(default=0, description="Test cases parsed")
    mapped: int = Field(default=0, description="Test cases mapped to IDs")
    skipped_unmapped: int = Field(default=0, description="Unmapped test cases")
    scenario_groups: int = Field(default=0, description="Scenario batches built")
    posted: int = Field(default=0, description="Executions accepted")
    failed: int = Field(default=0, description="Executions rejected")
    dry_run: bool = Field(default=False)
    exit_code: ExitCode = Field(default=ExitCode.SUCCESS)
    message: str | None = Field(
        default=None, description="Reason for an aborted run"
    )
