"""Result reporter — shapes a RunOutcome into MCP tool content."""

from __future__ import annotations

import base64
import json
from typing import Union

from mcp.types import ImageContent, TextContent

from triflow_smoke.core.types import Failure, RunOutcome

ContentPart = Union[TextContent, ImageContent]

PNG_MIME_TYPE = "image/png"


class ResultReporter:
    """
    Maps a RunOutcome to a JSON text part plus an optional PNG part.

    No retries and no rewriting of content: the outcome's payload is
    serialized as-is.
    """

    def finalize(self, outcome: RunOutcome) -> list[ContentPart]:
        parts: list[ContentPart] = [
            TextContent(type="text", text=json.dumps(outcome.to_payload())),
        ]
        if outcome.screenshot:
            parts.append(
                ImageContent(
                    type="image",
                    data=base64.b64encode(outcome.screenshot).decode("ascii"),
                    mimeType=PNG_MIME_TYPE,
                )
            )
        return parts

    def reject(self, error: str) -> list[ContentPart]:
        """Failure content for a run that never started (e.g. invalid arguments)."""
        return self.finalize(Failure(steps=[], error=error))
