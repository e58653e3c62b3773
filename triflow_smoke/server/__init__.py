from triflow_smoke.server.registry import (
    RegistrationResult,
    ToolRegistry,
    ToolSpec,
    register_smoketest,
)

__all__ = ["RegistrationResult", "ToolRegistry", "ToolSpec", "register_smoketest"]
