"""Shared types and dataclasses for the smoke test."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl

DEFAULT_BASE_URL = "https://triflow.ai"


class ScenarioInput(BaseModel):
    """Caller-supplied parameters for one smoke test run. Immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: HttpUrl = Field(
        default=DEFAULT_BASE_URL,
        alias="baseUrl",
        validate_default=True,
        description="Application root, e.g. https://triflow.ai",
    )
    email: EmailStr = Field(description="Login email")
    password: str = Field(min_length=1, repr=False, description="Login password")

    @property
    def root(self) -> str:
        """Base URL without trailing slash, ready for path joining."""
        return str(self.base_url).rstrip("/")


class Stage(str, Enum):
    LOGGING_IN = "logging_in"
    SUBMITTING_CREATE = "submitting_create"
    AWAITING_DERIVED_PAGE = "awaiting_derived_page"
    RECONCILING_SECONDARY_ACTION = "reconciling_secondary_action"
    VERIFYING_RESULT = "verifying_result"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.SUCCEEDED, Stage.FAILED)


class WaitOutcome(str, Enum):
    """Result of a tolerant wait: the engine branches on it instead of catching."""

    MET = "met"
    TIMED_OUT = "timed_out"
    FAILED = "failed"  # browser error other than a timeout


@dataclass(frozen=True)
class ResponseMatcher:
    """Predicate for a network response: URL contains a fragment and the request used a method."""

    url_fragment: str
    method: str = "POST"

    def matches(self, url: str, method: str) -> bool:
        return self.url_fragment in url and method.upper() == self.method.upper()


@dataclass(frozen=True)
class Success:
    steps: list[str]
    opportunity_id: str
    screenshot: bytes | None = field(default=None, repr=False)  # attached only when configured

    @property
    def ok(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        return {"ok": True, "steps": list(self.steps), "opportunityId": self.opportunity_id}


@dataclass(frozen=True)
class Failure:
    steps: list[str]
    error: str
    screenshot: bytes | None = field(default=None, repr=False)
    opportunity_id: str | None = None

    @property
    def ok(self) -> bool:
        return False

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"ok": False, "steps": list(self.steps), "error": self.error}
        if self.opportunity_id:
            payload["opportunityId"] = self.opportunity_id
        return payload


RunOutcome = Union[Success, Failure]
