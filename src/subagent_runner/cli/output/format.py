"""Plain-text formatting of usage counters and run results for terminal output."""

import json
from pathlib import Path
from typing import Any

from subagent_runner.run.domain.result import (
    DisplayItem,
    DisplayText,
    RunResult,
)
from subagent_runner.run.domain.usage import UsageStats

_ARGS_PREVIEW_CHARS = 50
_COMMAND_PREVIEW_CHARS = 60


def format_tokens(count: int) -> str:
    """Abbreviate a token count: 999, 1.2k, 45k, 1.3M."""
    if count < 1_000:
        return str(count)
    if count < 10_000:
        return f"{count / 1_000:.1f}k"
    if count < 1_000_000:
        return f"{round(count / 1_000)}k"
    return f"{count / 1_000_000:.1f}M"


def format_usage(usage: UsageStats, model: str | None = None) -> str:
    """One-line usage summary; zero-valued counters are omitted."""
    parts: list[str] = []
    if usage.turns:
        parts.append(f"{usage.turns} turn{'s' if usage.turns > 1 else ''}")
    if usage.input_tokens:
        parts.append(f"↑{format_tokens(usage.input_tokens)}")
    if usage.output_tokens:
        parts.append(f"↓{format_tokens(usage.output_tokens)}")
    if usage.cache_read_tokens:
        parts.append(f"R{format_tokens(usage.cache_read_tokens)}")
    if usage.cache_write_tokens:
        parts.append(f"W{format_tokens(usage.cache_write_tokens)}")
    if usage.cost_usd:
        parts.append(f"${usage.cost_usd:.4f}")
    if usage.context_tokens > 0:
        parts.append(f"ctx:{format_tokens(usage.context_tokens)}")
    if model:
        parts.append(model)
    return " ".join(parts)


def status_label(result: RunResult) -> str:
    if result.is_running:
        return "running"
    if result.is_aborted:
        return "aborted"
    if result.is_error:
        return "failed"
    return "done"


def _truncate(text: str, max_len: int) -> str:
    return f"{text[:max_len]}..." if len(text) > max_len else text


def _shorten_path(path: str) -> str:
    home = str(Path.home())
    return f"~{path[len(home):]}" if path.startswith(home) else path


def format_tool_call(name: str, args: dict[str, Any]) -> str:
    """Compact rendering of one tool call, specialised for common file/shell tools."""
    path = str(args.get("file_path") or args.get("path") or "...")
    if name == "bash":
        return f"$ {_truncate(str(args.get('command') or '...'), _COMMAND_PREVIEW_CHARS)}"
    if name in ("read", "write", "edit", "ls"):
        return f"{name} {_shorten_path(path if name != 'ls' else str(args.get('path') or '.'))}"
    if name in ("find", "grep"):
        pattern = str(args.get("pattern") or ("*" if name == "find" else ""))
        where = _shorten_path(str(args.get("path") or "."))
        shown = pattern if name == "find" else f"/{pattern}/"
        return f"{name} {shown} in {where}"
    return f"{name} {_truncate(json.dumps(args, default=str), _ARGS_PREVIEW_CHARS)}"


def format_display_item(item: DisplayItem) -> str:
    if isinstance(item, DisplayText):
        return item.text
    return f"→ {format_tool_call(item.name, item.args)}"
