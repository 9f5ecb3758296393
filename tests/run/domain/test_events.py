"""Tests for process_event_line."""

import json
from typing import Any

from subagent_runner.run.domain.events import process_event_line
from subagent_runner.run.domain.result import RunResult


def _line(kind: str, message: Any) -> str:
    return json.dumps({"type": kind, "message": message})


def _assistant(text: str = "ok", **extra: Any) -> dict[str, Any]:
    return {"role": "assistant", "content": [{"type": "text", "text": text}], **extra}


def _make_result() -> RunResult:
    return RunResult(agent="writer", task="t")


class TestMessageEnd:
    def test_assistant_message_is_appended_and_counted(self) -> None:
        result = _make_result()
        changed = process_event_line(
            _line(
                "message_end",
                _assistant(
                    "hello",
                    model="m-1",
                    stopReason="stop",
                    usage={"input": 100, "output": 20, "totalTokens": 120, "cost": {"total": 0.01}},
                ),
            ),
            result,
        )

        assert changed
        assert len(result.messages) == 1
        assert result.usage.turns == 1
        assert result.usage.input_tokens == 100
        assert result.usage.context_tokens == 120
        assert result.model == "m-1"
        assert result.stop_reason == "stop"
        assert result.final_output() == "hello"

    def test_first_reported_model_is_kept(self) -> None:
        result = _make_result()
        process_event_line(_line("message_end", _assistant(model="first")), result)
        process_event_line(_line("message_end", _assistant(model="second")), result)

        assert result.model == "first"

    def test_configured_model_is_not_overwritten(self) -> None:
        result = RunResult(agent="writer", task="t", model="configured")
        process_event_line(_line("message_end", _assistant(model="reported")), result)

        assert result.model == "configured"

    def test_stop_reason_and_error_message_are_last_wins(self) -> None:
        result = _make_result()
        process_event_line(_line("message_end", _assistant(stopReason="toolUse")), result)
        process_event_line(
            _line("message_end", _assistant(stopReason="error", errorMessage="rate limited")),
            result,
        )

        assert result.stop_reason == "error"
        assert result.error_message == "rate limited"
        assert result.usage.turns == 2

    def test_non_assistant_message_is_appended_without_usage(self) -> None:
        result = _make_result()
        changed = process_event_line(
            _line("message_end", {"role": "user", "content": "Task: x"}), result
        )

        assert changed
        assert len(result.messages) == 1
        assert result.usage.turns == 0

    def test_null_usage_counters_do_not_drop_the_message(self) -> None:
        result = _make_result()
        changed = process_event_line(
            _line(
                "message_end",
                _assistant("done", usage={"input": None, "output": 5}),
            ),
            result,
        )

        assert changed
        assert len(result.messages) == 1
        assert result.final_output() == "done"
        assert result.usage.turns == 1
        assert result.usage.input_tokens == 0
        assert result.usage.output_tokens == 5

    def test_garbage_usage_and_cost_read_as_zero(self) -> None:
        result = _make_result()
        process_event_line(
            _line(
                "message_end",
                _assistant(
                    "done",
                    usage={
                        "input": "lots",
                        "output": 7,
                        "cacheRead": True,
                        "totalTokens": 40,
                        "cost": {"input": None, "total": 0.5},
                    },
                ),
            ),
            result,
        )

        assert result.final_output() == "done"
        assert result.usage.input_tokens == 0
        assert result.usage.output_tokens == 7
        assert result.usage.cache_read_tokens == 0
        assert result.usage.context_tokens == 40
        assert result.usage.cost_usd == 0.5

    def test_non_object_usage_is_ignored(self) -> None:
        result = _make_result()
        process_event_line(_line("message_end", _assistant("done", usage="n/a")), result)

        assert result.final_output() == "done"
        assert result.usage.turns == 1
        assert result.usage.output_tokens == 0


class TestToolResultEnd:
    def test_tool_result_is_appended_only(self) -> None:
        result = _make_result()
        changed = process_event_line(
            _line(
                "tool_result_end",
                {
                    "role": "toolResult",
                    "toolCallId": "c1",
                    "toolName": "bash",
                    "content": [{"type": "text", "text": "files"}],
                    "isError": False,
                    "usage": {"input": 999},
                },
            ),
            result,
        )

        assert changed
        assert result.messages[0].tool_name == "bash"
        assert result.usage.turns == 0
        assert result.usage.input_tokens == 0


class TestIgnoredLines:
    def test_blank_line(self) -> None:
        assert not process_event_line("   ", _make_result())

    def test_malformed_json(self) -> None:
        result = _make_result()
        assert not process_event_line("{not json", result)
        assert result.messages == []

    def test_non_object_json(self) -> None:
        assert not process_event_line("[1, 2]", _make_result())

    def test_unknown_event_kind(self) -> None:
        result = _make_result()
        assert not process_event_line(_line("message_update", _assistant()), result)
        assert result.messages == []

    def test_missing_message_payload(self) -> None:
        assert not process_event_line(json.dumps({"type": "message_end"}), _make_result())

    def test_invalid_message_payload(self) -> None:
        result = _make_result()
        assert not process_event_line(_line("message_end", {"content": []}), result)
        assert result.messages == []
