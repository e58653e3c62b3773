"""Workflow engine — runs the login → create → analyze → verify scenario."""

from __future__ import annotations

import logging
import secrets
import string
from typing import Callable

from triflow_smoke.core.config import SmokeConfig
from triflow_smoke.core.errors import DiagnosedFailure, MissingIdentifier, NavigationMismatch
from triflow_smoke.core.types import (
    Failure,
    RunOutcome,
    ScenarioInput,
    Stage,
    Success,
    WaitOutcome,
)
from triflow_smoke.workflow import routes
from triflow_smoke.workflow.page_control import PageControl
from triflow_smoke.workflow.session import SessionProvider, session
from triflow_smoke.workflow.tracer import StepTracer

logger = logging.getLogger("triflow_smoke.workflow")

_TOKEN_ALPHABET = string.digits + string.ascii_lowercase


def random_token(length: int = 6) -> str:
    """Short base-36 token that keeps record names unique across runs."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


class WorkflowEngine:
    """
    Drives one smoke test scenario through a browser session.

    Stages run strictly in order:

    LOGGING_IN
        Open the login page, sign in, wait for the dashboard. If the redirect
        times out, navigate to the dashboard directly and carry on.
    SUBMITTING_CREATE
        Fill in a new opportunity with a unique name and submit it.
    AWAITING_DERIVED_PAGE
        Tolerantly wait for the analysis page, then check where the browser
        actually is and read ``opportunityId`` from the query string.
    RECONCILING_SECONDARY_ACTION
        On the hypotheses page, click "Add First Hypothesis" or else
        "Add Hypothesis" if either is visible; otherwise assume existing state.
    VERIFYING_RESULT
        Pass if the page shows at least one table row or hypothesis heading.

    ``run()`` never raises: every error becomes a ``Failure`` carrying the
    step trace recorded up to that point.
    """

    def __init__(
        self,
        sessions: SessionProvider,
        config: SmokeConfig | None = None,
        *,
        token_factory: Callable[[], str] | None = None,
    ) -> None:
        self._sessions = sessions
        self._config = config or SmokeConfig()
        self._token_factory = token_factory or random_token
        self.stage: Stage | None = None

    async def run(self, scenario: ScenarioInput) -> RunOutcome:
        tracer = StepTracer()
        self.stage = None
        try:
            async with session(self._sessions) as page:
                outcome = await self._run_stages(page, scenario, tracer)
        except DiagnosedFailure as exc:
            self._enter(Stage.FAILED)
            logger.warning("smoke test failed: %s", exc)
            outcome = Failure(steps=tracer.snapshot(), error=str(exc), screenshot=exc.screenshot)
        except Exception as exc:
            self._enter(Stage.FAILED)
            logger.error("smoke test aborted after %r: %s", tracer.last, exc)
            outcome = Failure(steps=tracer.snapshot(), error=str(exc) or type(exc).__name__)

        logger.info(
            "smoke test finished ok=%s stage=%s steps=%d",
            outcome.ok,
            self.stage.value if self.stage else None,
            len(outcome.steps),
        )
        return outcome

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _run_stages(
        self, page: PageControl, scenario: ScenarioInput, tracer: StepTracer
    ) -> RunOutcome:
        root = scenario.root
        await self._login(page, scenario, tracer)
        await self._submit_create(page, root, tracer)
        opportunity_id = await self._await_derived_page(page, tracer)
        await self._reconcile_secondary_action(page, root, opportunity_id, tracer)
        return await self._verify(page, opportunity_id, tracer)

    async def _login(self, page: PageControl, scenario: ScenarioInput, tracer: StepTracer) -> None:
        self._enter(Stage.LOGGING_IN)
        root = scenario.root
        tracer.record("Open login")
        await page.goto(f"{root}{routes.LOGIN_PATH}")
        await page.wait_for_selector(routes.EMAIL_INPUT, self._config.element_timeout_ms)
        await page.fill(routes.EMAIL_INPUT, str(scenario.email))
        await page.fill(routes.PASSWORD_INPUT, scenario.password)

        tracer.record("Submit login")
        await page.click(routes.SUBMIT_BUTTON)
        redirect = await page.wait_for_url(
            routes.DASHBOARD_URL_RE, self._config.login_redirect_timeout_ms
        )
        if redirect is WaitOutcome.TIMED_OUT:
            logger.info("dashboard redirect timed out; navigating directly")
            await page.goto(f"{root}{routes.DASHBOARD_PATH}")
        tracer.record("Login complete")

    async def _submit_create(self, page: PageControl, root: str, tracer: StepTracer) -> None:
        self._enter(Stage.SUBMITTING_CREATE)
        tracer.record("Open new opportunity page")
        await page.goto(f"{root}{routes.NEW_OPPORTUNITY_PATH}")
        await page.wait_for_selector(routes.NAME_INPUT, self._config.element_timeout_ms)
        name = f"{routes.OPPORTUNITY_NAME_PREFIX} {self._token_factory()}"
        await page.fill(routes.NAME_INPUT, name)
        await page.fill(routes.PROBLEM_STATEMENT_INPUT, routes.PROBLEM_STATEMENT)

        tracer.record("Submit analyze with intelligence")
        await page.click(routes.SUBMIT_BUTTON)

    async def _await_derived_page(self, page: PageControl, tracer: StepTracer) -> str:
        self._enter(Stage.AWAITING_DERIVED_PAGE)
        waited = await page.wait_for_url(routes.ANALYSIS_URL_RE, self._config.analysis_timeout_ms)
        final_url = page.url
        if routes.ANALYSIS_PATH not in final_url:
            logger.warning("analysis wait %s, browser is at %s", waited.value, final_url)
            raise NavigationMismatch(final_url, await page.screenshot())
        tracer.record("Reached analysis page")

        opportunity_id = routes.opportunity_id_from(final_url)
        if not opportunity_id:
            raise MissingIdentifier(routes.OPPORTUNITY_ID_PARAM, await page.screenshot())
        return opportunity_id

    async def _reconcile_secondary_action(
        self, page: PageControl, root: str, opportunity_id: str, tracer: StepTracer
    ) -> None:
        self._enter(Stage.RECONCILING_SECONDARY_ACTION)
        tracer.record("Open hypotheses page")
        await page.goto(routes.hypotheses_url(root, opportunity_id))

        for label in (routes.ADD_FIRST_HYPOTHESIS, routes.ADD_HYPOTHESIS):
            if await page.role_visible("button", label):
                tracer.record(f"Click {label}")
                await page.click_role("button", label)
                created = await page.wait_for_response(
                    routes.HYPOTHESIS_CREATED, self._config.response_timeout_ms
                )
                if created is not WaitOutcome.MET:
                    logger.info("hypothesis creation response not observed (%s)", created.value)
                reloaded = await page.reload()
                if reloaded is not WaitOutcome.MET:
                    logger.info("hypotheses page reload %s", reloaded.value)
                return

        tracer.record("No add button found; checking existing hypotheses")

    async def _verify(self, page: PageControl, opportunity_id: str, tracer: StepTracer) -> RunOutcome:
        self._enter(Stage.VERIFYING_RESULT)
        tracer.record("Verify hypotheses visible")
        rows = await page.count(routes.HYPOTHESIS_ROWS)
        cards = await page.count_role("heading", routes.HYPOTHESIS_HEADING_RE)
        shot = await page.screenshot()
        logger.debug("verification rows=%d cards=%d", rows, cards)

        if rows > 0 or cards > 0:
            self._enter(Stage.SUCCEEDED)
            return Success(
                steps=tracer.snapshot(),
                opportunity_id=opportunity_id,
                screenshot=shot if self._config.screenshot_on_success else None,
            )
        self._enter(Stage.FAILED)
        return Failure(
            steps=tracer.snapshot(),
            error="No hypotheses visible",
            screenshot=shot,
            opportunity_id=opportunity_id,
        )

    def _enter(self, stage: Stage) -> None:
        if self.stage is not None and self.stage.is_terminal:
            raise RuntimeError(f"run already {self.stage.value}; cannot enter {stage.value}")
        logger.debug("stage %s -> %s", self.stage.value if self.stage else "start", stage.value)
        self.stage = stage
