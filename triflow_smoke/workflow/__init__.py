"""Workflow engine, step tracer and the browser contracts they consume."""

from triflow_smoke.workflow.engine import WorkflowEngine, random_token
from triflow_smoke.workflow.page_control import PageControl, PlaywrightPageControl
from triflow_smoke.workflow.session import PlaywrightSessionProvider, SessionProvider, session
from triflow_smoke.workflow.tracer import StepTracer

__all__ = [
    "PageControl",
    "PlaywrightPageControl",
    "PlaywrightSessionProvider",
    "SessionProvider",
    "StepTracer",
    "WorkflowEngine",
    "random_token",
    "session",
]
