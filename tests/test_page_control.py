"""Unit tests for PlaywrightPageControl (AsyncMock page, no browser)."""

from __future__ import annotations

import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from triflow_smoke.core.errors import ElementNotFound
from triflow_smoke.core.types import ResponseMatcher, WaitOutcome
from triflow_smoke.workflow.page_control import PlaywrightPageControl


def make_page(url="https://example.test/login") -> AsyncMock:
    page = AsyncMock()
    page.url = url
    loc = AsyncMock()
    loc.fill = AsyncMock()
    loc.click = AsyncMock()
    loc.is_visible = AsyncMock(return_value=True)
    loc.count = AsyncMock(return_value=2)
    page.locator = MagicMock(return_value=loc)
    page.get_by_role = MagicMock(return_value=loc)
    page.screenshot = AsyncMock(return_value=b"png")
    return page


class TestPlaywrightPageControl:
    def setup_method(self):
        self.page = make_page()
        self.control = PlaywrightPageControl(self.page)

    # ------------------------------------------------------------------ navigation

    async def test_goto_waits_for_load(self):
        await self.control.goto("https://example.test/login")
        self.page.goto.assert_awaited_once_with("https://example.test/login", wait_until="load")

    def test_url_reflects_page(self):
        self.page.url = "https://example.test/dashboard"
        assert self.control.url == "https://example.test/dashboard"

    # ------------------------------------------------------------------ fatal selector wait

    async def test_wait_for_selector_passes_timeout(self):
        await self.control.wait_for_selector("#email", 20000)
        self.page.wait_for_selector.assert_awaited_once_with("#email", timeout=20000)

    async def test_wait_for_selector_timeout_raises_element_not_found(self):
        self.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 20000ms exceeded")
        with pytest.raises(ElementNotFound) as exc_info:
            await self.control.wait_for_selector("#email", 20000)
        assert exc_info.value.selector == "#email"
        assert exc_info.value.timeout_ms == 20000

    # ------------------------------------------------------------------ fill / click

    async def test_fill_and_click_use_locator(self):
        await self.control.fill("#email", "a@b.com")
        await self.control.click('button[type="submit"]')
        self.page.locator.assert_any_call("#email")
        self.page.locator.assert_any_call('button[type="submit"]')
        self.page.locator.return_value.fill.assert_awaited_once_with("a@b.com")
        self.page.locator.return_value.click.assert_awaited_once()

    # ------------------------------------------------------------------ tolerant url wait

    async def test_wait_for_url_met(self):
        pattern = re.compile(r"/dashboard")
        assert await self.control.wait_for_url(pattern, 30000) is WaitOutcome.MET
        self.page.wait_for_url.assert_awaited_once_with(pattern, timeout=30000)

    async def test_wait_for_url_timeout(self):
        self.page.wait_for_url.side_effect = PlaywrightTimeoutError("Timeout")
        outcome = await self.control.wait_for_url(re.compile("/dashboard"), 30000)
        assert outcome is WaitOutcome.TIMED_OUT

    async def test_wait_for_url_other_error_propagates(self):
        self.page.wait_for_url.side_effect = PlaywrightError("Target closed")
        with pytest.raises(PlaywrightError):
            await self.control.wait_for_url(re.compile("/dashboard"), 30000)

    # ------------------------------------------------------------------ affordances

    async def test_role_visible(self):
        assert await self.control.role_visible("button", "Add Hypothesis") is True
        self.page.get_by_role.assert_called_with("button", name="Add Hypothesis")

    async def test_role_visible_swallows_browser_errors(self):
        self.page.get_by_role.return_value.is_visible.side_effect = PlaywrightError("detached")
        assert await self.control.role_visible("button", "Add Hypothesis") is False

    async def test_click_role(self):
        await self.control.click_role("button", "Add First Hypothesis")
        self.page.get_by_role.assert_called_with("button", name="Add First Hypothesis")
        self.page.get_by_role.return_value.click.assert_awaited_once()

    # ------------------------------------------------------------------ response wait

    async def test_wait_for_response_predicate(self):
        matcher = ResponseMatcher("/api/opportunities/", "POST")
        assert await self.control.wait_for_response(matcher, 60000) is WaitOutcome.MET

        predicate = self.page.wait_for_response.await_args.args[0]
        assert self.page.wait_for_response.await_args.kwargs == {"timeout": 60000}
        post = MagicMock(url="https://x.test/api/opportunities/1", request=MagicMock(method="POST"))
        get = MagicMock(url="https://x.test/api/opportunities/1", request=MagicMock(method="GET"))
        assert predicate(post) is True
        assert predicate(get) is False

    async def test_wait_for_response_timeout(self):
        self.page.wait_for_response.side_effect = PlaywrightTimeoutError("Timeout")
        outcome = await self.control.wait_for_response(ResponseMatcher("/api/"), 10)
        assert outcome is WaitOutcome.TIMED_OUT

    async def test_wait_for_response_error(self):
        self.page.wait_for_response.side_effect = PlaywrightError("Page closed")
        outcome = await self.control.wait_for_response(ResponseMatcher("/api/"), 10)
        assert outcome is WaitOutcome.FAILED

    # ------------------------------------------------------------------ reload

    async def test_reload_met(self):
        assert await self.control.reload() is WaitOutcome.MET
        self.page.reload.assert_awaited_once_with(wait_until="load")

    async def test_reload_error_tolerated(self):
        self.page.reload.side_effect = PlaywrightError("net::ERR_ABORTED")
        assert await self.control.reload() is WaitOutcome.FAILED

    async def test_reload_timeout_tolerated(self):
        self.page.reload.side_effect = PlaywrightTimeoutError("Timeout")
        assert await self.control.reload() is WaitOutcome.TIMED_OUT

    # ------------------------------------------------------------------ counting / screenshot

    async def test_count(self):
        assert await self.control.count("table tbody tr") == 2
        self.page.locator.assert_called_with("table tbody tr")

    async def test_count_role_passes_pattern(self):
        pattern = re.compile("Hypothesis", re.IGNORECASE)
        assert await self.control.count_role("heading", pattern) == 2
        self.page.get_by_role.assert_called_with("heading", name=pattern)

    async def test_screenshot_full_page_png(self):
        assert await self.control.screenshot() == b"png"
        self.page.screenshot.assert_awaited_once_with(full_page=True, type="png")
