"""Failure taxonomy raised inside a run and converted to a Failure outcome by the engine."""

from __future__ import annotations


class SmokeTestError(Exception):
    """Base class for classified smoke test failures."""


class ElementNotFound(SmokeTestError):
    """A required element never appeared within its bound. Fatal, no screenshot."""

    def __init__(self, selector: str, timeout_ms: int) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(f"Element {selector!r} not found within {timeout_ms}ms")


class DiagnosedFailure(SmokeTestError):
    """A fatal failure that carries a full-page screenshot of the page at the time."""

    def __init__(self, message: str, screenshot: bytes | None = None) -> None:
        self.screenshot = screenshot
        super().__init__(message)


class NavigationMismatch(DiagnosedFailure):
    """The browser settled on a URL other than the expected one."""

    def __init__(self, url: str, screenshot: bytes | None = None) -> None:
        self.url = url
        super().__init__(f"Did not reach analysis page: {url}", screenshot)


class MissingIdentifier(DiagnosedFailure):
    """The expected page loaded without carrying the record identifier."""

    def __init__(self, name: str = "opportunityId", screenshot: bytes | None = None) -> None:
        self.name = name
        super().__init__(f"Missing {name}", screenshot)
