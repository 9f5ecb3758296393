"""Tests for the scoped system prompt file."""

import stat

import pytest

from subagent_runner.run.infrastructure.prompt_file import system_prompt_file


class TestSystemPromptFile:
    def test_blank_prompt_yields_none(self) -> None:
        with system_prompt_file("writer", "  \n") as path:
            assert path is None

    def test_prompt_is_written_owner_only(self) -> None:
        with system_prompt_file("writer", "You write.") as path:
            assert path is not None
            assert path.read_text(encoding="utf-8") == "You write."
            assert path.name == "prompt-writer.md"
            assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_file_and_directory_are_removed_on_exit(self) -> None:
        with system_prompt_file("writer", "You write.") as path:
            assert path is not None
        assert not path.exists()
        assert not path.parent.exists()

    def test_file_is_removed_when_body_raises(self) -> None:
        with pytest.raises(RuntimeError):
            with system_prompt_file("writer", "You write.") as path:
                assert path is not None
                raise RuntimeError("boom")
        assert not path.exists()

    def test_unsafe_characters_are_replaced_in_file_name(self) -> None:
        with system_prompt_file("../evil agent", "x") as path:
            assert path is not None
            assert path.name == "prompt-.._evil_agent.md"
            assert path.parent.name.startswith("subagent-")
