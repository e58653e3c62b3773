"""In-memory PageControl / SessionProvider doubles for engine and server tests."""

from __future__ import annotations

import re

from triflow_smoke.core.errors import ElementNotFound
from triflow_smoke.core.types import ResponseMatcher, WaitOutcome

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"
ROOT = "https://example.test"
ANALYSIS_URL = f"{ROOT}/dashboard/new-opportunity/analysis?opportunityId=opp-123"


class FakePage:
    """
    Scriptable page: every wait resolves immediately unless told otherwise.

    Submitting the login form lands on the dashboard when ``login_redirects``
    is true; submitting the create form lands on ``analysis_url``.
    """

    def __init__(
        self,
        *,
        login_redirects: bool = True,
        analysis_url: str = ANALYSIS_URL,
        visible: tuple[str, ...] = ("Add First Hypothesis",),
        rows: int = 1,
        cards: int = 0,
        missing: tuple[str, ...] = (),
        response: WaitOutcome = WaitOutcome.MET,
        reload: WaitOutcome = WaitOutcome.MET,
        fail_on: dict[str, Exception] | None = None,
    ) -> None:
        self._url = "about:blank"
        self.login_redirects = login_redirects
        self.analysis_url = analysis_url
        self.visible = visible
        self.rows = rows
        self.cards = cards
        self.missing = missing
        self.response = response
        self.reload_outcome = reload
        self.fail_on = fail_on or {}
        self.calls: list[tuple] = []

    def _log(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise self.fail_on[op]

    def calls_to(self, op: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == op]

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str) -> None:
        self._log("goto", url)
        self._url = url

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        self._log("wait_for_selector", selector, timeout_ms)
        if selector in self.missing:
            raise ElementNotFound(selector, timeout_ms)

    async def fill(self, selector: str, value: str) -> None:
        self._log("fill", selector, value)

    async def click(self, selector: str) -> None:
        self._log("click", selector)
        if self._url.endswith("/login") and self.login_redirects:
            self._url = self._url[: -len("/login")] + "/dashboard"
        elif self._url.endswith("/dashboard/new-opportunity"):
            self._url = self.analysis_url

    async def wait_for_url(self, pattern: re.Pattern[str], timeout_ms: int) -> WaitOutcome:
        self._log("wait_for_url", pattern.pattern, timeout_ms)
        return WaitOutcome.MET if pattern.search(self._url) else WaitOutcome.TIMED_OUT

    async def role_visible(self, role: str, name: str) -> bool:
        self._log("role_visible", role, name)
        return name in self.visible

    async def click_role(self, role: str, name: str) -> None:
        self._log("click_role", role, name)

    async def wait_for_response(self, matcher: ResponseMatcher, timeout_ms: int) -> WaitOutcome:
        self._log("wait_for_response", matcher, timeout_ms)
        return self.response

    async def reload(self) -> WaitOutcome:
        self._log("reload")
        return self.reload_outcome

    async def count(self, selector: str) -> int:
        self._log("count", selector)
        return self.rows

    async def count_role(self, role: str, name_pattern: re.Pattern[str]) -> int:
        self._log("count_role", role, name_pattern.pattern)
        return self.cards

    async def screenshot(self) -> bytes:
        self._log("screenshot")
        return FAKE_PNG


class FakeSessions:
    """SessionProvider handing out one FakePage and counting releases."""

    def __init__(
        self,
        page: FakePage | None = None,
        *,
        acquire_error: Exception | None = None,
        release_error: Exception | None = None,
    ) -> None:
        self.page = page or FakePage()
        self.acquire_error = acquire_error
        self.release_error = release_error
        self.acquired = 0
        self.released = 0

    async def acquire(self) -> FakePage:
        self.acquired += 1
        if self.acquire_error is not None:
            raise self.acquire_error
        return self.page

    async def release(self) -> None:
        self.released += 1
        if self.release_error is not None:
            raise self.release_error
