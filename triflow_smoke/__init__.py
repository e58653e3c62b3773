from triflow_smoke.core.config import SmokeConfig
from triflow_smoke.core.errors import (
    DiagnosedFailure,
    ElementNotFound,
    MissingIdentifier,
    NavigationMismatch,
    SmokeTestError,
)
from triflow_smoke.core.types import (
    Failure,
    ResponseMatcher,
    RunOutcome,
    ScenarioInput,
    Stage,
    Success,
    WaitOutcome,
)
from triflow_smoke.reporter.reporter import ResultReporter
from triflow_smoke.server.registry import RegistrationResult, ToolRegistry, register_smoketest
from triflow_smoke.workflow.engine import WorkflowEngine
from triflow_smoke.workflow.tracer import StepTracer

__all__ = [
    "SmokeConfig",
    "DiagnosedFailure",
    "ElementNotFound",
    "MissingIdentifier",
    "NavigationMismatch",
    "SmokeTestError",
    "Failure",
    "ResponseMatcher",
    "RunOutcome",
    "ScenarioInput",
    "Stage",
    "Success",
    "WaitOutcome",
    "ResultReporter",
    "RegistrationResult",
    "ToolRegistry",
    "register_smoketest",
    "WorkflowEngine",
    "StepTracer",
]
