"""Message value objects — the conversational records streamed by a subagent process.

The child emits camelCase JSON. Every model accepts unknown keys so that new
fields added by the child degrade gracefully instead of rejecting the record.
"""

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def _as_number(value: Any) -> float:
    """Coerce a reported counter to a number; anything unusable counts as zero."""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return 0.0
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


class TokenCost(_WireModel):
    """Dollar cost breakdown reported with an assistant message."""

    input: float = 0.0
    output: float = 0.0
    cache_read: float = 0.0
    cache_write: float = 0.0
    total: float = 0.0

    @field_validator("input", "output", "cache_read", "cache_write", "total", mode="before")
    @classmethod
    def _tolerate_bad_amount(cls, value: Any) -> float:
        return _as_number(value)


class MessageUsage(_WireModel):
    """Per-message usage deltas. total_tokens is a context-window snapshot, not a delta.

    Counters the child reports as null or garbage read as zero, so one bad
    field never costs the whole message.
    """

    input_tokens: int = Field(default=0, alias="input")
    output_tokens: int = Field(default=0, alias="output")
    cache_read: int = 0
    cache_write: int = 0
    total_tokens: int = 0
    cost: TokenCost | None = None

    @field_validator(
        "input_tokens", "output_tokens", "cache_read", "cache_write", "total_tokens",
        mode="before",
    )
    @classmethod
    def _tolerate_bad_count(cls, value: Any) -> int:
        return int(_as_number(value))

    @field_validator("cost", mode="before")
    @classmethod
    def _drop_malformed_cost(cls, value: Any) -> Any:
        return value if isinstance(value, dict | TokenCost) else None


class TextPart(_WireModel):
    type: Literal["text"]
    text: str


class ToolCallPart(_WireModel):
    type: Literal["toolCall"]
    id: str = ""
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class OtherPart(_WireModel):
    """Any content part this package does not interpret (thinking, image, ...)."""

    type: str


ContentPart = Annotated[
    TextPart | ToolCallPart | OtherPart, Field(union_mode="left_to_right")
]


class Message(_WireModel):
    """One conversational message: assistant turn, user prompt, or tool result."""

    role: str
    content: list[ContentPart] | str = Field(default_factory=list)
    model: str | None = None
    usage: MessageUsage | None = None
    stop_reason: str | None = None
    error_message: str | None = None
    tool_call_id: str | None = None
    tool_name: str | None = None
    is_error: bool | None = None

    @field_validator("usage", mode="before")
    @classmethod
    def _drop_malformed_usage(cls, value: Any) -> Any:
        return value if isinstance(value, dict | MessageUsage) else None

    @property
    def is_assistant(self) -> bool:
        return self.role == "assistant"

    def parts(self) -> list[ContentPart]:
        """Return content as a list of parts; plain-string content becomes one TextPart."""
        if isinstance(self.content, str):
            return [TextPart(type="text", text=self.content)]
        return list(self.content)
