"""
Error Taxonomy
==============

Every failure Switchboard reports carries a stable `kind` string. The kind
ends up in `TaskResult.error_kind`, so callers can categorize failures
without parsing messages.

Propagation:
    ConfigurationError      -> task failed (no client / no model)
    ProviderError           -> task failed, never retried here
    ParseError              -> absorbed by the classifier (heuristic fallback)
    ToolExecutionError      -> contained in a ToolResult, the loop continues
    MaxIterationsExceeded   -> task failed with its own kind
    CancellationError       -> task failed, not retried
"""


class SwitchboardError(Exception):
    """Base class for all Switchboard errors."""

    kind = "error"


class ConfigurationError(SwitchboardError):
    """A provider, client or model required for the call is not configured."""

    kind = "configuration_error"


class ProviderError(SwitchboardError):
    """The upstream chat-completion backend failed."""

    kind = "provider_error"


class ProviderTimeoutError(ProviderError):
    """A provider call did not finish before its deadline."""

    def __init__(self, provider: str, timeout: float):
        super().__init__(f"{provider} call timed out after {timeout:g}s")
        self.provider = provider
        self.timeout = timeout


class ParseError(SwitchboardError):
    """Structured model output could not be parsed."""

    kind = "parse_error"


class ToolExecutionError(SwitchboardError):
    """A tool failed while running."""

    kind = "tool_error"

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"{tool_name}: {message}")
        self.tool_name = tool_name


class MaxIterationsExceeded(SwitchboardError):
    """The tool loop hit its iteration cap without a final answer."""

    kind = "max_iterations_exceeded"

    def __init__(self, max_iterations: int):
        super().__init__(
            f"Max iterations ({max_iterations}) reached without completion"
        )
        self.max_iterations = max_iterations


class CancellationError(SwitchboardError):
    """The task was cancelled through its cancellation token."""

    kind = "cancelled"

    def __init__(self, reason: str = "Task was cancelled"):
        super().__init__(reason)


class InvalidTaskTransition(SwitchboardError):
    """A task was moved to a status its lifecycle does not allow."""

    kind = "invalid_transition"
