"""ParallelOutcome — final results of a parallel delegation plus summary statistics."""

from pydantic import BaseModel

from subagent_runner.run.domain.result import RunResult
from subagent_runner.run.domain.usage import UsageStats

_PREVIEW_CHARS = 100
_NO_OUTPUT = "(no output)"


def summarize_result(result: RunResult) -> str:
    """One line: '[agent] completed|failed: <final output preview>'."""
    output = result.final_output()
    preview = f"{output[:_PREVIEW_CHARS]}..." if len(output) > _PREVIEW_CHARS else output
    status = "completed" if result.exit_code == 0 else "failed"
    return f"[{result.agent}] {status}: {preview or _NO_OUTPUT}"


class ParallelOutcome(BaseModel, frozen=True):
    """Completed results in request order."""

    results: list[RunResult]

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.exit_code == 0)

    @property
    def usage(self) -> UsageStats:
        return UsageStats.total(result.usage for result in self.results)

    def summary_lines(self) -> list[str]:
        return [summarize_result(result) for result in self.results]

    def summary(self) -> str:
        header = f"Parallel: {self.success_count}/{len(self.results)} succeeded"
        return "\n\n".join([header, *self.summary_lines()])
