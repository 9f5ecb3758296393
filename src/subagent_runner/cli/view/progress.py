"""LiveProgressView — renders streaming run progress as a Rich table on stderr."""

from __future__ import annotations

from rich.console import Console, Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from subagent_runner.cli.output.format import (
    format_display_item,
    format_usage,
    status_label,
)
from subagent_runner.run.domain.progress import ProgressUpdate
from subagent_runner.run.domain.result import RunResult

_STATUS_STYLES: dict[str, str] = {
    "running": "yellow",
    "done": "bright_green",
    "failed": "red",
    "aborted": "magenta",
}
_ACTIVITY_CHARS = 60


class LiveProgressView:
    """Progress callback that keeps one table row per subagent run up to date.

    The Live display starts lazily on the first update so that runs which fail
    before producing anything leave the terminal untouched.

    Pass ``disabled=True`` to record updates without drawing anything (useful
    in tests and with ``--quiet``).
    """

    def __init__(self, disabled: bool = False, console: Console | None = None) -> None:
        self._disabled = disabled
        self._console = console or Console(stderr=True)
        self._live: Live | None = None
        self.last_update: ProgressUpdate | None = None
        self.update_count = 0

    def __call__(self, update: ProgressUpdate) -> None:
        self.last_update = update
        self.update_count += 1
        if self._disabled:
            return
        if self._live is None:
            self._live = Live(
                self.render(update),
                console=self._console,
                refresh_per_second=10,
                transient=True,
            )
            self._live.start()
        else:
            self._live.update(self.render(update))

    def stop(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def render(self, update: ProgressUpdate) -> Group:
        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Agent", style="cyan", no_wrap=True)
        table.add_column("Status", no_wrap=True)
        table.add_column("Activity", overflow="ellipsis", max_width=_ACTIVITY_CHARS)
        table.add_column("Usage", style="dim", no_wrap=True)
        for result in update.results:
            table.add_row(*_row(result))
        return Group(Text(update.content, style="bold"), table)


def _row(result: RunResult) -> tuple[str, Text, str, str]:
    label = status_label(result)
    items = result.display_items()
    activity = format_display_item(items[-1]) if items else ""
    first_line = activity.splitlines()[0] if activity else ""
    return (
        result.agent,
        Text(label, style=_STATUS_STYLES[label]),
        first_line,
        format_usage(result.usage, result.model),
    )
