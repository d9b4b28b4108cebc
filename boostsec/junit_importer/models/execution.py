"""Models for execution submissions and their wire representation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExecutionRequest(BaseModel):
    """A mapped test case ready to be submitted as an execution."""

    model_config = ConfigDict(frozen=True)

    test_case_id: int = Field(..., description="Numeric test case identifier")
    status: str = Field(..., description="Execution status on the remote service")
    duration_ms: int | None = Field(default=None, description="Duration in ms")
    started_at: datetime | None = Field(default=None)
    finished_at: datetime | None = Field(default=None)
    external_run_id: str | None = Field(
        default=None, description="CI run identifier for correlation"
    )
    run_name: str | None = Field(default=None, description="Friendly run name")
    error_message: str | None = Field(default=None)
    error_details: str | None = Field(default=None)
    project_id: int | None = Field(default=None, description="Remote project ID")
    scenario_id: int = Field(
        ..., description="Scenario used for grouping, not sent top-level"
    )


class SubmitResult(BaseModel):
    """Result of one submission call (one scenario group)."""

    success: bool = Field(..., description="Whether the whole batch was accepted")
    posted: int = Field(default=0, description="Executions accepted")
    failed: int = Field(default=0, description="Executions rejected")
    error_message: str | None = Field(
        default=None, description="Plain text failure description"
    )


class ExecutionDuration(BaseModel):
    """Typed duration value object expected by the TestExecution API."""

    model_config = ConfigDict(populate_by_name=True)

    field_value_type: str = Field(default="TimeSpan", alias="fieldValueType")
    value: float = Field(..., description="Duration in seconds")
    unit: str = Field(default="Second")


class ExecutionStep(BaseModel):
    """Synthetic single step carrying the execution status."""

    index: int = Field(default=1)
    status: str


class ScenarioInfo(BaseModel):
    """Position of an execution inside its scenario batch."""

    model_config = ConfigDict(populate_by_name=True)

    index: int = Field(..., description="1-based position within the batch")
    test_scenario_id: int = Field(..., alias="testScenarioId")
    test_job_id: int = Field(..., alias="testJobId")


class ExecutionPayload(BaseModel):
    """Wire representation of a single execution (camelCase, nulls omitted)."""

    model_config = ConfigDict(populate_by_name=True)

    test_case_id: int = Field(..., alias="testCaseId")
    steps: list[ExecutionStep] = Field(default_factory=list)
    execution_duration: ExecutionDuration | None = Field(
        default=None, alias="executionDuration"
    )
    started_at: datetime | None = Field(default=None, alias="startedAt")
    finished_at: datetime | None = Field(default=None, alias="finishedAt")
    external_run_id: str | None = Field(default=None, alias="externalRunId")
    run_name: str | None = Field(default=None, alias="runName")
    error_message: str | None = Field(default=None, alias="errorMessage")
    error_details: str | None = Field(default=None, alias="errorDetails")
    project_id: int | None = Field(default=None, alias="projectId")
    test_scenario_info: ScenarioInfo = Field(..., alias="testScenarioInfo")

    @classmethod
    def from_request(
        cls, request: ExecutionRequest, position: int
    ) -> "ExecutionPayload":
        """Build the wire object for ``request`` at 1-based ``position``."""
        duration = None
        if request.duration_ms is not None:
            duration = ExecutionDuration(value=request.duration_ms / 1000.0)

        return cls(
            test_case_id=request.test_case_id,
            steps=[ExecutionStep(index=1, status=request.status)],
            execution_duration=duration,
            started_at=request.started_at,
            finished_at=request.finished_at,
            external_run_id=request.external_run_id,
            run_name=request.run_name,
            error_message=request.error_message,
            error_details=request.error_details,
            project_id=request.project_id,
            test_scenario_info=ScenarioInfo(
                index=position,
                test_scenario_id=request.scenario_id,
                test_job_id=position,
            ),
        )

    def to_wire(self) -> dict[str, object]:
        """Serialize with camelCase names and without null fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
