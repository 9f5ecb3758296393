"""Tests for MarkdownAgentLoader and frontmatter parsing."""

from pathlib import Path

import pytest
import yaml

from subagent_runner.agent.infrastructure.markdown_loader import (
    MarkdownAgentLoader,
    parse_frontmatter,
)
from tests.agent.fake_observer import FakeAgentDiscoveryObserver

_PROJECT_PATH = Path(".pi") / "agents"


def _write_agent(
    directory: Path,
    name: str,
    description: str = "Does things",
    body: str = "You are helpful.\n",
    extra: str = "",
    file_name: str | None = None,
) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (file_name or f"{name}.md")
    path.write_text(
        f"---\nname: {name}\ndescription: {description}\n{extra}---\n{body}",
        encoding="utf-8",
    )
    return path


def _make_loader(
    tmp_path: Path,
) -> tuple[MarkdownAgentLoader, FakeAgentDiscoveryObserver, Path, Path]:
    observer = FakeAgentDiscoveryObserver()
    user_dir = tmp_path / "home" / "agents"
    repo = tmp_path / "repo"
    (repo / "src" / "pkg").mkdir(parents=True)
    loader = MarkdownAgentLoader(
        user_agents_dir=user_dir,
        project_agents_path=_PROJECT_PATH,
        observer=observer,
    )
    return loader, observer, user_dir, repo


class TestParseFrontmatter:
    def test_splits_mapping_and_body(self) -> None:
        meta, body = parse_frontmatter("---\nname: a\ndescription: b\n---\nBody\n")

        assert meta == {"name": "a", "description": "b"}
        assert body == "Body\n"

    def test_no_fence_yields_whole_text(self) -> None:
        meta, body = parse_frontmatter("Just text")

        assert meta == {}
        assert body == "Just text"

    def test_crlf_is_normalised(self) -> None:
        meta, body = parse_frontmatter("---\r\nname: a\r\n---\r\nBody")

        assert meta == {"name": "a"}
        assert body == "Body"

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(yaml.YAMLError):
            parse_frontmatter("---\nname: [unclosed\n---\nBody")


class TestUserScope:
    def test_loads_user_agents_with_fields(self, tmp_path: Path) -> None:
        loader, _, user_dir, repo = _make_loader(tmp_path)
        _write_agent(
            user_dir,
            "writer",
            extra="tools: read, bash, ,\nmodel: m-1\nthinking: high\n",
        )

        catalog = loader.load(cwd=repo, scope="user")

        [agent] = catalog.agents
        assert agent.name == "writer"
        assert agent.tools == ["read", "bash"]
        assert agent.model == "m-1"
        assert agent.thinking == "high"
        assert agent.system_prompt == "You are helpful.\n"
        assert agent.source == "user"

    def test_missing_user_dir_is_empty(self, tmp_path: Path) -> None:
        loader, observer, _, repo = _make_loader(tmp_path)

        catalog = loader.load(cwd=repo, scope="user")

        assert catalog.agents == []
        assert observer.discovered[0].agent_names == []

    def test_user_scope_ignores_project_agents(self, tmp_path: Path) -> None:
        loader, _, _, repo = _make_loader(tmp_path)
        _write_agent(repo / _PROJECT_PATH, "local")

        catalog = loader.load(cwd=repo, scope="user")

        assert catalog.agents == []

    def test_empty_tools_becomes_none(self, tmp_path: Path) -> None:
        loader, _, user_dir, repo = _make_loader(tmp_path)
        _write_agent(user_dir, "writer", extra="tools: ' , '\n")

        [agent] = loader.load(cwd=repo, scope="user").agents

        assert agent.tools is None


class TestProjectDiscovery:
    def test_project_dir_is_found_from_nested_cwd(self, tmp_path: Path) -> None:
        loader, observer, _, repo = _make_loader(tmp_path)
        _write_agent(repo / _PROJECT_PATH, "local")

        catalog = loader.load(cwd=repo / "src" / "pkg", scope="project")

        assert [agent.name for agent in catalog.agents] == ["local"]
        assert catalog.agents[0].source == "project"
        assert catalog.project_agents_dir == repo / _PROJECT_PATH
        assert observer.discovered[0].project_agents_dir == repo / _PROJECT_PATH

    def test_no_project_dir(self, tmp_path: Path) -> None:
        loader, _, _, repo = _make_loader(tmp_path)

        assert loader.find_project_agents_dir(repo) is None


class TestBothScope:
    def test_project_overrides_user_with_same_name(self, tmp_path: Path) -> None:
        loader, _, user_dir, repo = _make_loader(tmp_path)
        _write_agent(user_dir, "writer", description="user writer")
        _write_agent(user_dir, "reviewer")
        _write_agent(repo / _PROJECT_PATH, "writer", description="project writer")
        _write_agent(repo / _PROJECT_PATH, "tester")

        catalog = loader.load(cwd=repo, scope="both")

        assert [agent.name for agent in catalog.agents] == ["reviewer", "writer", "tester"]
        writer = catalog.get("writer")
        assert writer is not None
        assert writer.description == "project writer"
        assert writer.source == "project"


class TestSkippedFiles:
    def test_file_without_description_is_skipped(self, tmp_path: Path) -> None:
        loader, observer, user_dir, repo = _make_loader(tmp_path)
        user_dir.mkdir(parents=True)
        (user_dir / "broken.md").write_text("---\nname: broken\n---\nBody", encoding="utf-8")

        catalog = loader.load(cwd=repo, scope="user")

        assert catalog.agents == []
        assert observer.skipped[0].reason == "missing name or description"

    def test_invalid_frontmatter_is_skipped(self, tmp_path: Path) -> None:
        loader, observer, user_dir, repo = _make_loader(tmp_path)
        user_dir.mkdir(parents=True)
        (user_dir / "bad.md").write_text("---\nname: [oops\n---\n", encoding="utf-8")
        _write_agent(user_dir, "good")

        catalog = loader.load(cwd=repo, scope="user")

        assert [agent.name for agent in catalog.agents] == ["good"]
        assert observer.skipped[0].reason.startswith("invalid frontmatter")

    def test_non_markdown_files_are_ignored(self, tmp_path: Path) -> None:
        loader, observer, user_dir, repo = _make_loader(tmp_path)
        user_dir.mkdir(parents=True)
        (user_dir / "notes.txt").write_text("---\nname: x\ndescription: y\n---\n", encoding="utf-8")

        assert loader.load(cwd=repo, scope="user").agents == []
        assert observer.skipped == []
