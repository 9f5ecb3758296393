"""Error types raised by the parallel application layer."""

from subagent_runner.core.errors import SubagentRunnerError


class TooManyTasksError(SubagentRunnerError):
    """Raised before any work starts when more tasks are requested than allowed."""

    def __init__(self, requested: int, maximum: int) -> None:
        self.requested = requested
        self.maximum = maximum
        super().__init__(
            f"Failed to start parallel run: too many parallel tasks ({requested}). "
            f"Max is {maximum}."
        )
