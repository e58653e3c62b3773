"""Page control — the browser operations the workflow engine consumes."""

from __future__ import annotations

import re
from typing import Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from triflow_smoke.core.errors import ElementNotFound
from triflow_smoke.core.types import ResponseMatcher, WaitOutcome


class PageControl(Protocol):
    """
    Contract for a live, controllable browser page.

    Fatal waits raise; tolerant waits return a ``WaitOutcome`` instead of
    raising, so callers branch on the variant rather than on exceptions.
    """

    @property
    def url(self) -> str: ...

    async def goto(self, url: str) -> None: ...

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None: ...

    async def fill(self, selector: str, value: str) -> None: ...

    async def click(self, selector: str) -> None: ...

    async def wait_for_url(self, pattern: re.Pattern[str], timeout_ms: int) -> WaitOutcome: ...

    async def role_visible(self, role: str, name: str) -> bool: ...

    async def click_role(self, role: str, name: str) -> None: ...

    async def wait_for_response(self, matcher: ResponseMatcher, timeout_ms: int) -> WaitOutcome: ...

    async def reload(self) -> WaitOutcome: ...

    async def count(self, selector: str) -> int: ...

    async def count_role(self, role: str, name_pattern: re.Pattern[str]) -> int: ...

    async def screenshot(self) -> bytes: ...


class PlaywrightPageControl:
    """PageControl backed by a Playwright ``Page``."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str) -> None:
        await self._page.goto(url, wait_until="load")

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFound(selector, timeout_ms) from exc

    async def fill(self, selector: str, value: str) -> None:
        await self._page.locator(selector).fill(value)

    async def click(self, selector: str) -> None:
        await self._page.locator(selector).click()

    async def wait_for_url(self, pattern: re.Pattern[str], timeout_ms: int) -> WaitOutcome:
        # Only a timeout is tolerated here; any other browser error propagates.
        try:
            await self._page.wait_for_url(pattern, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return WaitOutcome.TIMED_OUT
        return WaitOutcome.MET

    async def role_visible(self, role: str, name: str) -> bool:
        try:
            return await self._page.get_by_role(role, name=name).is_visible()
        except PlaywrightError:
            return False

    async def click_role(self, role: str, name: str) -> None:
        await self._page.get_by_role(role, name=name).click()

    async def wait_for_response(self, matcher: ResponseMatcher, timeout_ms: int) -> WaitOutcome:
        try:
            await self._page.wait_for_response(
                lambda response: matcher.matches(response.url, response.request.method),
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError:
            return WaitOutcome.TIMED_OUT
        except PlaywrightError:
            return WaitOutcome.FAILED
        return WaitOutcome.MET

    async def reload(self) -> WaitOutcome:
        try:
            await self._page.reload(wait_until="load")
        except PlaywrightTimeoutError:
            return WaitOutcome.TIMED_OUT
        except PlaywrightError:
            return WaitOutcome.FAILED
        return WaitOutcome.MET

    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    async def count_role(self, role: str, name_pattern: re.Pattern[str]) -> int:
        return await self._page.get_by_role(role, name=name_pattern).count()

    async def screenshot(self) -> bytes:
        return await self._page.screenshot(full_page=True, type="png")
