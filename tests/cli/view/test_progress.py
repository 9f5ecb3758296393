"""Tests for LiveProgressView."""

import io

from rich.console import Console

from subagent_runner.cli.view.progress import LiveProgressView
from subagent_runner.run.domain.message import Message, TextPart
from subagent_runner.run.domain.progress import ProgressUpdate
from subagent_runner.run.domain.result import RunResult


def _make_update() -> ProgressUpdate:
    result = RunResult(
        agent="writer",
        task="t",
        messages=[Message(role="assistant", content=[TextPart(type="text", text="Drafting\nmore")])],
    )
    return ProgressUpdate(content="Parallel: 0/1 done, 1 running...", mode="parallel", results=[result])


class TestLiveProgressView:
    def test_disabled_view_records_without_drawing(self) -> None:
        buffer = io.StringIO()
        view = LiveProgressView(disabled=True, console=Console(file=buffer))
        update = _make_update()

        view(update)
        view.stop()

        assert view.last_update is update
        assert view.update_count == 1
        assert buffer.getvalue() == ""

    def test_render_contains_agent_status_and_activity(self) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, force_terminal=False)
        view = LiveProgressView(disabled=True, console=console)

        console.print(view.render(_make_update()))

        output = buffer.getvalue()
        assert "Parallel: 0/1 done, 1 running..." in output
        assert "writer" in output
        assert "running" in output
        assert "Drafting" in output
        assert "more" not in output

    def test_enabled_view_starts_and_stops_live(self) -> None:
        buffer = io.StringIO()
        view = LiveProgressView(console=Console(file=buffer, width=120))

        view(_make_update())
        view(_make_update())
        view.stop()

        assert view.update_count == 2
