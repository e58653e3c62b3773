"""Triflow application paths, URL patterns and element selectors."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, quote, urlparse

from triflow_smoke.core.types import ResponseMatcher

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
NEW_OPPORTUNITY_PATH = "/dashboard/new-opportunity"
ANALYSIS_PATH = "/dashboard/new-opportunity/analysis"
HYPOTHESES_PATH = "/dashboard/new-opportunity/analysis/hypotheses"

DASHBOARD_URL_RE = re.compile(r"/dashboard(/|$)")
ANALYSIS_URL_RE = re.compile(re.escape(ANALYSIS_PATH))

EMAIL_INPUT = "#email"
PASSWORD_INPUT = "#password"
SUBMIT_BUTTON = 'button[type="submit"]'
NAME_INPUT = 'input[name="name"]'
PROBLEM_STATEMENT_INPUT = 'textarea[name="problem_statement"]'
HYPOTHESIS_ROWS = "table tbody tr"

# Checked in this order; at most one is clicked
ADD_FIRST_HYPOTHESIS = "Add First Hypothesis"
ADD_HYPOTHESIS = "Add Hypothesis"
HYPOTHESIS_HEADING_RE = re.compile(r"Hypothesis", re.IGNORECASE)

HYPOTHESIS_CREATED = ResponseMatcher(url_fragment="/api/opportunities/", method="POST")

OPPORTUNITY_ID_PARAM = "opportunityId"
OPPORTUNITY_NAME_PREFIX = "E2E MCP Opportunity"
PROBLEM_STATEMENT = (
    "Users struggle to complete key flows on mobile during peak hours; "
    "drop-offs increased 18% QoQ. E2E test."
)


def opportunity_id_from(url: str) -> str:
    """Return the opportunityId query parameter of ``url``, or '' if absent."""
    values = parse_qs(urlparse(url).query).get(OPPORTUNITY_ID_PARAM)
    return values[0] if values else ""


def hypotheses_url(root: str, opportunity_id: str) -> str:
    return f"{root}{HYPOTHESES_PATH}?{OPPORTUNITY_ID_PARAM}={quote(opportunity_id, safe='')}"
