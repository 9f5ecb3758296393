"""Host system-prompt section advertising the subagents available for delegation."""

from subagent_runner.agent.domain.config import AgentConfig


def available_agents_section(agents: list[AgentConfig]) -> str:
    """Return the '## Available Subagents' block, or '' when there are no agents."""
    if not agents:
        return ""
    listing = "\n".join(f"- **{agent.name}**: {agent.description}" for agent in agents)
    return (
        "\n\n## Available Subagents\n\n"
        "The following subagents are available for delegation via the `subagent` tool:\n\n"
        f"{listing}\n\n"
        "Use the subagent tool to delegate tasks to these specialized agents when appropriate.\n"
    )


def append_available_agents(system_prompt: str, agents: list[AgentConfig]) -> str:
    """Append the available-agents section to *system_prompt*; unchanged when empty."""
    return system_prompt + available_agents_section(agents)
