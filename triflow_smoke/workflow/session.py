"""Session provisioning — acquire a browser page for one run, always release it."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

from playwright.async_api import Browser, Playwright, async_playwright

from triflow_smoke.core.config import SmokeConfig
from triflow_smoke.workflow.page_control import PageControl, PlaywrightPageControl

logger = logging.getLogger("triflow_smoke.workflow")


class SessionProvider(Protocol):
    async def acquire(self) -> PageControl: ...

    async def release(self) -> None: ...


@asynccontextmanager
async def session(provider: SessionProvider) -> AsyncIterator[PageControl]:
    """
    Acquire a page once and release the session on every exit path.

    A failure while releasing is logged and dropped so it never replaces
    the outcome (or the exception) of the body.
    """
    try:
        page = await provider.acquire()
    except Exception:
        # acquire may fail half-way (driver started, launch failed)
        await _release(provider)
        raise
    try:
        yield page
    finally:
        await _release(provider)


async def _release(provider: SessionProvider) -> None:
    try:
        await provider.release()
    except Exception as exc:
        logger.warning("browser release failed: %s", exc)


class PlaywrightSessionProvider:
    """Launches a local Chromium through Playwright and opens a single page."""

    def __init__(self, config: SmokeConfig | None = None) -> None:
        self._config = config or SmokeConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def acquire(self) -> PageControl:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._config.headless,
            args=list(self._config.launch_args),
        )
        page = await self._browser.new_page()
        logger.debug("browser session acquired (headless=%s)", self._config.headless)
        return PlaywrightPageControl(page)

    async def release(self) -> None:
        browser, pw = self._browser, self._playwright
        self._browser = None
        self._playwright = None
        try:
            if browser is not None:
                await browser.close()
        finally:
            if pw is not None:
                await pw.stop()
        logger.debug("browser session released")
