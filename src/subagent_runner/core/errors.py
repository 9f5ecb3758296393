"""Base exception class for all subagent-runner-specific errors."""


class SubagentRunnerError(Exception):
    """Base class for all subagent-runner errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
