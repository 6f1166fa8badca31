"""Chat agents for Startup Setu."""

from src.agents.registry import (
    AGENTS,
    DEFAULT_AGENT,
    DEFAULT_AGENT_ID,
    AccessPolicy,
    AgentId,
    AgentProfile,
    resolve_agent,
)

__all__ = [
    "AGENTS",
    "DEFAULT_AGENT",
    "DEFAULT_AGENT_ID",
    "AccessPolicy",
    "AgentId",
    "AgentProfile",
    "resolve_agent",
]
