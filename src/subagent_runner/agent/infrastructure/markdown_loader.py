"""Markdown agent loader — discovers agent definitions from YAML-frontmatter .md files."""

from pathlib import Path
from typing import Any

import yaml

from subagent_runner.agent.domain.catalog import AgentCatalog
from subagent_runner.agent.domain.config import AgentConfig, AgentScope, ConfigSource
from subagent_runner.agent.domain.observer import AgentDiscoveryObserver

_FENCE = "---"


class MarkdownAgentLoader:
    """Loads user agents from a fixed directory and project agents from the nearest
    ``.pi/agents`` directory above the working directory.

    Satisfies the AgentLoader protocol structurally. Files that cannot be read or
    lack a name/description are skipped and reported to the observer, never raised.
    """

    def __init__(
        self,
        user_agents_dir: Path,
        project_agents_path: Path,
        observer: AgentDiscoveryObserver,
    ) -> None:
        self._user_agents_dir = user_agents_dir
        self._project_agents_path = project_agents_path
        self._observer = observer

    def load(self, cwd: Path, scope: AgentScope) -> AgentCatalog:
        """Discover agents for *scope*; in "both", project agents override user agents."""
        project_dir = self.find_project_agents_dir(cwd=cwd)

        user_agents = [] if scope == "project" else self._load_dir(self._user_agents_dir, "user")
        project_agents = (
            self._load_dir(project_dir, "project")
            if scope != "user" and project_dir is not None
            else []
        )

        by_name: dict[str, AgentConfig] = {}
        for agent in [*user_agents, *project_agents]:
            by_name[agent.name] = agent

        agents = list(by_name.values())
        self._observer.agents_discovered(
            scope=scope,
            agent_names=[agent.name for agent in agents],
            project_agents_dir=project_dir,
        )
        return AgentCatalog(agents=agents, project_agents_dir=project_dir)

    def find_project_agents_dir(self, cwd: Path) -> Path | None:
        """Walk up from *cwd* to the filesystem root looking for the project agents dir."""
        for directory in [cwd, *cwd.parents]:
            candidate = directory / self._project_agents_path
            if candidate.is_dir():
                return candidate
        return None

    def _load_dir(self, directory: Path, source: ConfigSource) -> list[AgentConfig]:
        if not directory.is_dir():
            return []
        agents: list[AgentConfig] = []
        for path in sorted(directory.glob("*.md")):
            if not path.is_file():
                continue
            agent = self._load_file(path=path, source=source)
            if agent is not None:
                agents.append(agent)
        return agents

    def _load_file(self, path: Path, source: ConfigSource) -> AgentConfig | None:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._observer.agent_file_skipped(path=path, reason=f"unreadable: {exc}")
            return None

        try:
            frontmatter, body = parse_frontmatter(text)
        except yaml.YAMLError as exc:
            self._observer.agent_file_skipped(path=path, reason=f"invalid frontmatter: {exc}")
            return None

        name = _as_str(frontmatter.get("name"))
        description = _as_str(frontmatter.get("description"))
        if not name or not description:
            self._observer.agent_file_skipped(path=path, reason="missing name or description")
            return None

        return AgentConfig(
            name=name,
            description=description,
            tools=_parse_tools(frontmatter.get("tools")),
            model=_as_str(frontmatter.get("model")),
            thinking=_as_str(frontmatter.get("thinking")),
            system_prompt=body,
            source=source,
            file_path=path,
        )


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into its YAML frontmatter mapping and body.

    Documents without a leading ``---`` fence, or with frontmatter that is not
    a mapping, yield an empty mapping and the full text as the body.

    Raises:
        yaml.YAMLError: if the fenced block is not valid YAML.
    """
    normalized = text.replace("\r\n", "\n")
    if not normalized.startswith(_FENCE + "\n"):
        return {}, normalized

    end = normalized.find("\n" + _FENCE, len(_FENCE))
    if end == -1:
        return {}, normalized

    raw = normalized[len(_FENCE) + 1 : end]
    body_start = normalized.find("\n", end + 1)
    body = "" if body_start == -1 else normalized[body_start + 1 :]

    parsed = yaml.safe_load(raw)
    if not isinstance(parsed, dict):
        return {}, body
    return parsed, body


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_tools(value: Any) -> list[str] | None:
    if value is None:
        return None
    items = value if isinstance(value, list) else str(value).split(",")
    tools = [str(item).strip() for item in items if str(item).strip()]
    return tools or None
