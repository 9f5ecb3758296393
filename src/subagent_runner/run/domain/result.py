"""RunResult — the state of one subagent invocation, from spawn to exit."""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

from subagent_runner.run.domain.message import Message, TextPart, ToolCallPart
from subagent_runner.run.domain.usage import UsageStats

type AgentSource = Literal["user", "project", "unknown"]

# Negative so it can never collide with a real process exit status (0-255).
RUNNING_EXIT_CODE = -1
ABORTED_EXIT_CODE = 130
ABORTED_STOP_REASON = "aborted"
ABORTED_MESSAGE = "Subagent was aborted."


@dataclass(frozen=True)
class DisplayText:
    text: str


@dataclass(frozen=True)
class DisplayToolCall:
    name: str
    args: dict[str, Any]


type DisplayItem = DisplayText | DisplayToolCall


def final_output(messages: list[Message]) -> str:
    """Return the first text part of the most recent assistant message that has one."""
    for message in reversed(messages):
        if not message.is_assistant:
            continue
        for part in message.parts():
            if isinstance(part, TextPart):
                return part.text
    return ""


def display_items(messages: list[Message]) -> list[DisplayItem]:
    """Flatten assistant text and tool calls, in arrival order, for rendering."""
    items: list[DisplayItem] = []
    for message in messages:
        if not message.is_assistant:
            continue
        for part in message.parts():
            if isinstance(part, TextPart):
                items.append(DisplayText(text=part.text))
            elif isinstance(part, ToolCallPart):
                items.append(DisplayToolCall(name=part.name, args=dict(part.arguments)))
    return items


class RunResult(BaseModel):
    """Outcome of one subagent run.

    Owned and mutated by its runner until the exit code leaves the running
    sentinel; callers only ever see deep-copied snapshots of an in-flight run.
    The messages list is append-only.
    """

    agent: str
    source: AgentSource = "unknown"
    task: str
    exit_code: int = RUNNING_EXIT_CODE
    messages: list[Message] = Field(default_factory=list)
    stderr: str = ""
    usage: UsageStats = Field(default_factory=UsageStats)
    model: str | None = None
    stop_reason: str | None = None
    error_message: str | None = None

    @property
    def is_running(self) -> bool:
        return self.exit_code == RUNNING_EXIT_CODE

    @property
    def is_error(self) -> bool:
        return self.exit_code > 0 or self.stop_reason in ("error", ABORTED_STOP_REASON)

    @property
    def is_aborted(self) -> bool:
        return self.exit_code == ABORTED_EXIT_CODE and self.stop_reason == ABORTED_STOP_REASON

    def final_output(self) -> str:
        return final_output(self.messages)

    def display_items(self) -> list[DisplayItem]:
        return display_items(self.messages)

    def snapshot(self) -> "RunResult":
        """Deep copy, safe to hand to progress callbacks while the run continues."""
        return self.model_copy(deep=True)

    def mark_aborted(self, message: str = ABORTED_MESSAGE) -> None:
        """Record cancellation: exit 130, stop reason "aborted", non-empty error and stderr."""
        self.exit_code = ABORTED_EXIT_CODE
        self.stop_reason = ABORTED_STOP_REASON
        if not self.error_message:
            self.error_message = message
        if not self.stderr.strip():
            self.stderr = message
