"""Tests for ParallelOutcome summaries."""

from subagent_runner.parallel.domain.outcome import ParallelOutcome, summarize_result
from subagent_runner.run.domain.message import Message, TextPart
from subagent_runner.run.domain.result import RunResult
from subagent_runner.run.domain.usage import UsageStats


def _make_result(agent: str, exit_code: int, output: str = "", turns: int = 1) -> RunResult:
    messages = (
        [Message(role="assistant", content=[TextPart(type="text", text=output)])]
        if output
        else []
    )
    return RunResult(
        agent=agent,
        task="t",
        exit_code=exit_code,
        messages=messages,
        usage=UsageStats(input_tokens=10, turns=turns),
    )


class TestSummarizeResult:
    def test_completed(self) -> None:
        assert summarize_result(_make_result("writer", 0, "all good")) == "[writer] completed: all good"

    def test_failed_without_output(self) -> None:
        assert summarize_result(_make_result("tester", 1)) == "[tester] failed: (no output)"

    def test_long_output_is_truncated(self) -> None:
        line = summarize_result(_make_result("writer", 0, "x" * 150))

        assert line == f"[writer] completed: {'x' * 100}..."


class TestParallelOutcome:
    def test_summary_counts_successes(self) -> None:
        outcome = ParallelOutcome(
            results=[
                _make_result("a", 0, "one"),
                _make_result("b", 2, "two"),
                _make_result("c", 0, "three"),
            ]
        )

        assert outcome.success_count == 2
        assert outcome.summary() == (
            "Parallel: 2/3 succeeded\n\n"
            "[a] completed: one\n\n"
            "[b] failed: two\n\n"
            "[c] completed: three"
        )

    def test_usage_is_summed(self) -> None:
        outcome = ParallelOutcome(results=[_make_result("a", 0, turns=1), _make_result("b", 0, turns=2)])

        assert outcome.usage.input_tokens == 20
        assert outcome.usage.turns == 3
