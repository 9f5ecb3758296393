"""UsageStats — token and cost counters for one run, or summed across runs."""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from subagent_runner.run.domain.message import MessageUsage


class UsageStats(BaseModel):
    """Accumulated usage counters.

    Mutated in place by the owning run while it streams; treated as read-only
    once the run has a terminal exit code. context_tokens is the latest
    context-window size, a snapshot rather than a running total, so it is
    dropped to zero when several stats are summed.
    """

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cache_read_tokens: int = Field(default=0, ge=0)
    cache_write_tokens: int = Field(default=0, ge=0)
    cost_usd: float = Field(default=0.0, ge=0.0)
    context_tokens: int = Field(default=0, ge=0)
    turns: int = Field(default=0, ge=0)

    def record_turn(self, usage: MessageUsage | None) -> None:
        """Count one assistant turn and fold in its usage deltas, if any.

        Negative deltas from the wire are clamped to zero so that counters
        never decrease within a run.
        """
        self.turns += 1
        if usage is None:
            return
        self.input_tokens += max(usage.input_tokens, 0)
        self.output_tokens += max(usage.output_tokens, 0)
        self.cache_read_tokens += max(usage.cache_read, 0)
        self.cache_write_tokens += max(usage.cache_write, 0)
        if usage.cost is not None:
            self.cost_usd += max(usage.cost.total, 0.0)
        self.context_tokens = max(usage.total_tokens, 0)

    def __add__(self, other: "UsageStats") -> "UsageStats":
        return UsageStats(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_read_tokens=self.cache_read_tokens + other.cache_read_tokens,
            cache_write_tokens=self.cache_write_tokens + other.cache_write_tokens,
            cost_usd=self.cost_usd + other.cost_usd,
            turns=self.turns + other.turns,
        )

    @classmethod
    def total(cls, stats: Iterable["UsageStats"]) -> "UsageStats":
        """Sum the additive fields of every entry in *stats*."""
        result = cls()
        for entry in stats:
            result = result + entry
        return result
