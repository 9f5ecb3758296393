"""Event-line parsing — folds one line of the child's JSON stream into a RunResult."""

import json
from typing import Any

from pydantic import ValidationError

from subagent_runner.run.domain.message import Message
from subagent_runner.run.domain.result import RunResult

MESSAGE_END = "message_end"
TOOL_RESULT_END = "tool_result_end"


def process_event_line(line: str, result: RunResult) -> bool:
    """Apply one stream line to *result*; return True when the result changed.

    Blank lines, invalid JSON, non-object payloads, messages that fail
    validation and unrecognised event kinds are all ignored.
    """
    if not line.strip():
        return False

    try:
        event = json.loads(line)
    except ValueError:
        return False
    if not isinstance(event, dict):
        return False

    kind = event.get("type")
    if kind == MESSAGE_END:
        message = _parse_message(event.get("message"))
        if message is None:
            return False
        result.messages.append(message)
        if message.is_assistant:
            _apply_assistant_message(message=message, result=result)
        return True
    elif kind == TOOL_RESULT_END:
        message = _parse_message(event.get("message"))
        if message is None:
            return False
        result.messages.append(message)
        return True

    return False


def _parse_message(raw: Any) -> Message | None:
    if not raw or not isinstance(raw, dict):
        return None
    try:
        return Message.model_validate(raw)
    except ValidationError:
        return None


def _apply_assistant_message(message: Message, result: RunResult) -> None:
    result.usage.record_turn(message.usage)
    if not result.model and message.model:
        result.model = message.model
    if message.stop_reason:
        result.stop_reason = message.stop_reason
    if message.error_message:
        result.error_message = message.error_message
