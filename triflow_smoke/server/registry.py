"""
Tool registry for the MCP server.

The registry is explicit process-scoped state: the host creates one and
passes it to ``register_smoketest``, which is idempotent.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from triflow_smoke.core.config import SmokeConfig
from triflow_smoke.core.types import ScenarioInput
from triflow_smoke.reporter.reporter import ContentPart, ResultReporter
from triflow_smoke.workflow.engine import WorkflowEngine
from triflow_smoke.workflow.session import PlaywrightSessionProvider, SessionProvider

logger = logging.getLogger("triflow_smoke.server")

SMOKETEST_TOOL = "triflow.smoketest"
SMOKETEST_DESCRIPTION = (
    "Run the Triflow end-to-end smoke test: log in, create an opportunity, "
    "run the analysis and verify hypotheses are visible. Returns a JSON result "
    "and, on failure, a full-page screenshot."
)

ToolHandler = Callable[[Any], Awaitable[list[ContentPart]]]
SessionsFactory = Callable[[], SessionProvider]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler
    # Applied to arguments the caller leaves out, before validation
    defaults: dict[str, Any] = field(default_factory=dict)

    def input_schema(self) -> dict[str, Any]:
        """JSON schema by alias, advertising the effective defaults."""
        schema = copy.deepcopy(self.input_model.model_json_schema(by_alias=True))
        properties = schema.get("properties", {})
        for key, value in self.defaults.items():
            if key in properties:
                properties[key]["default"] = value
        return schema

    def with_defaults(self, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Fill in defaults for fields the caller left out under either spelling."""
        merged = dict(arguments or {})
        for key, value in self.defaults.items():
            if not _spellings(self.input_model, key) & merged.keys():
                merged[key] = value
        return merged


@dataclass(frozen=True)
class RegistrationResult:
    ok: bool
    registered: bool = False
    error: str | None = None


class ToolRegistry:
    """Name → ToolSpec table with argument validation on dispatch."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}
        self._reporter = ResultReporter()

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> list[str]:
        return list(self._tools)

    def specs(self) -> list[ToolSpec]:
        return list(self._tools.values())

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> list[ContentPart]:
        """
        Validate ``arguments`` against the tool's input model and run it.

        Raises:
            KeyError: If the tool is not registered
        """
        spec = self._tools.get(name)
        if spec is None:
            raise KeyError(f"Unknown tool: {name}")
        try:
            params = spec.input_model.model_validate(spec.with_defaults(arguments))
        except ValidationError as exc:
            logger.warning("%s: invalid arguments (%d errors)", name, exc.error_count())
            return self._reporter.reject(f"Invalid arguments: {_summarize(exc)}")
        return await spec.handler(params)


def _spellings(model: type[BaseModel], key: str) -> set[str]:
    # populate_by_name models accept both the field name and its alias
    for name, info in model.model_fields.items():
        if key in (name, info.alias):
            return {name, info.alias or name}
    return {key}


def _summarize(exc: ValidationError) -> str:
    # Never echo input values back (they may contain the password)
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()
    )


def make_smoketest_handler(
    sessions_factory: SessionsFactory,
    config: SmokeConfig,
    reporter: ResultReporter | None = None,
) -> ToolHandler:
    """Handler that runs one scenario on a fresh session per invocation."""
    reporter = reporter or ResultReporter()

    async def handle(scenario: ScenarioInput) -> list[ContentPart]:
        engine = WorkflowEngine(sessions_factory(), config)
        outcome = await engine.run(scenario)
        return reporter.finalize(outcome)

    return handle


def register_smoketest(
    registry: ToolRegistry,
    config: SmokeConfig | None = None,
    sessions_factory: SessionsFactory | None = None,
) -> RegistrationResult:
    """
    Register ``triflow.smoketest`` on ``registry`` exactly once.

    A second call is a no-op reported as ``registered=False``. Errors are
    returned in the result, never raised, so the host keeps starting up and
    the caller decides how to log them.
    """
    if registry.has(SMOKETEST_TOOL):
        return RegistrationResult(ok=True, registered=False)
    try:
        config = config or SmokeConfig()
        if sessions_factory is None:
            sessions_factory = lambda: PlaywrightSessionProvider(config)  # noqa: E731
        registry.register(
            ToolSpec(
                name=SMOKETEST_TOOL,
                description=SMOKETEST_DESCRIPTION,
                input_model=ScenarioInput,
                handler=make_smoketest_handler(sessions_factory, config),
                defaults={"baseUrl": config.default_base_url},
            )
        )
    except Exception as exc:
        return RegistrationResult(ok=False, error=f"{type(exc).__name__}: {exc}")
    return RegistrationResult(ok=True, registered=True)
