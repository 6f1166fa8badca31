"""Per-agent access decisions.

Each agent declares one AccessPolicy in the registry; this service turns the
policy into a yes/no by reading the matching table. A failed lookup is
logged and treated as "not granted".
"""

import logging
from dataclasses import dataclass

from src.agents.registry import AccessPolicy, AgentProfile
from src.core.exceptions import DatabaseError
from src.db.supabase import SupabaseClient

logger = logging.getLogger(__name__)

SUBSCRIPTION_REQUIRED_MESSAGE = (
    "This agent requires a premium subscription. Please upgrade to unlock access."
)
UNLOCK_REQUIRED_TEMPLATE = (
    "Based on your current stage, you need the {display_name} to continue. "
    "Please upgrade or unlock access to this agent to proceed."
)


@dataclass(frozen=True)
class AccessDecision:
    """Result of an access check."""

    agent: AgentProfile
    granted: bool

    @property
    def upgrade_message(self) -> str:
        """Text shown to the user when access is denied."""
        if self.agent.access_policy is AccessPolicy.UNLOCK:
            return UNLOCK_REQUIRED_TEMPLATE.format(display_name=self.agent.display_name)
        return SUBSCRIPTION_REQUIRED_MESSAGE


class AccessService:
    """Decides whether a user may talk to an agent."""

    async def check_access(self, user_id: str, agent: AgentProfile) -> AccessDecision:
        """Apply the agent's declared policy for this user.

        Args:
            user_id: The requesting user.
            agent: Resolved agent profile.

        Returns:
            AccessDecision; the free agent is always granted without a lookup.
        """
        if agent.access_policy is AccessPolicy.FREE:
            return AccessDecision(agent=agent, granted=True)

        try:
            if agent.access_policy is AccessPolicy.UNLOCK:
                row = await SupabaseClient.get_agent_access(user_id, agent.display_name)
                granted = bool(row) and row.get("unlocked") is True
            else:
                row = await SupabaseClient.get_subscription(user_id, agent.id)
                granted = bool(row) and row.get("is_active") is True
        except DatabaseError:
            logger.warning(
                "Access lookup failed; treating as locked",
                exc_info=True,
                extra={"user_id": user_id, "agent": agent.id},
            )
            granted = False

        if not granted:
            logger.info(
                "Agent access denied",
                extra={
                    "user_id": user_id,
                    "agent": agent.id,
                    "policy": agent.access_policy.value,
                },
            )
        return AccessDecision(agent=agent, granted=granted)
