"""Registry of chat agents: identity, persona and access policy.

Every agent is declared once with the gate that protects it, so the chat
orchestrator never needs to know which table guards which agent.

Usage:
    profile = resolve_agent(request.preferred_agent)
    if profile.access_policy is AccessPolicy.FREE: ...
"""

import enum
from dataclasses import dataclass


class AgentId(str, enum.Enum):
    """Stable agent identifiers (the ``agent_id`` stored in subscriptions)."""

    BUSINESS_BLUEPRINTING = "business-blueprinting"
    BUSINESS_SUPPORT_SERVICES = "business-support-services"
    BUSINESS_LEGAL_SOLUTIONS = "business-legal-solutions"
    HR_SOLUTIONS = "hr-solutions"
    FUNDING_AND_LOANS = "funding-loans"
    FINANCE_CONSULTATION = "finance-consultation"
    ACCOUNT_MANAGEMENT = "account-management"
    AUDITORS_AND_COMPLIANCE = "auditors-compliance"
    PRODUCT_DEVELOPMENT = "product-development"
    BRANDING_AND_CREATIVES = "branding-creatives"
    AI_DIGITAL_MARKETING = "ai-digital-marketing"


class AccessPolicy(str, enum.Enum):
    """Which gate an agent sits behind."""

    FREE = "free"  # always granted
    SUBSCRIPTION = "subscription"  # active row in ``subscriptions``
    UNLOCK = "unlock"  # unlocked row in ``agent_access``


@dataclass(frozen=True)
class AgentProfile:
    """Everything the chat flow needs to know about one agent.

    ``recognized`` is False for names that are not in the registry; such
    profiles carry the default persona and the subscription gate.
    """

    id: str
    display_name: str
    persona: str
    access_policy: AccessPolicy
    recognized: bool = True

    @property
    def is_free(self) -> bool:
        return self.access_policy is AccessPolicy.FREE


DEFAULT_AGENT_ID = AgentId.BUSINESS_BLUEPRINTING

AGENTS: dict[AgentId, AgentProfile] = {
    AgentId.BUSINESS_BLUEPRINTING: AgentProfile(
        id=AgentId.BUSINESS_BLUEPRINTING.value,
        display_name="Business Blueprinting Agent",
        persona=(
            "You are the Business Blueprinting Agent for Startup Setu. Your role is to help "
            "validate and structure startup ideas, ask clarifying questions, and help the "
            "founder sharpen their value proposition and early model. You MUST ask clarifying "
            "questions when information is missing. Be collaborative, empathetic, and practical."
        ),
        access_policy=AccessPolicy.FREE,
    ),
    AgentId.BUSINESS_SUPPORT_SERVICES: AgentProfile(
        id=AgentId.BUSINESS_SUPPORT_SERVICES.value,
        display_name="Business Support Services Agent",
        persona=(
            "You are the Business Support Services Agent. Help with company registration, GST "
            "setup, bank account opening, and operational services. Provide guidance on "
            "processes, timelines, and checklists. Be concise and action-oriented."
        ),
        access_policy=AccessPolicy.UNLOCK,
    ),
    AgentId.BUSINESS_LEGAL_SOLUTIONS: AgentProfile(
        id=AgentId.BUSINESS_LEGAL_SOLUTIONS.value,
        display_name="Business Legal Solutions Agent",
        persona=(
            "You are the Business Legal Solutions Agent. Provide guidance on legal matters "
            "including contracts, intellectual property, compliance, and regulatory "
            "requirements. Always recommend consulting with a licensed attorney for critical "
            "legal decisions."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.HR_SOLUTIONS: AgentProfile(
        id=AgentId.HR_SOLUTIONS.value,
        display_name="HR Solutions Agent",
        persona=(
            "You are the HR Solutions Agent. Advise on HR policies, recruitment, employee "
            "management, payroll, and workplace compliance. Help with hiring strategies and "
            "employee development."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.FUNDING_AND_LOANS: AgentProfile(
        id=AgentId.FUNDING_AND_LOANS.value,
        display_name="Funding & Loans Agent",
        persona=(
            "You are the Funding & Loans Agent. Guide entrepreneurs on fundraising strategies, "
            "investor relations, loan options, and alternative financing. Help with pitch "
            "preparation and financial projections."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.FINANCE_CONSULTATION: AgentProfile(
        id=AgentId.FINANCE_CONSULTATION.value,
        display_name="Finance Consultation Agent",
        persona=(
            "You are the Finance Consultation Agent. Provide financial planning, budgeting, "
            "cash flow management, and financial forecasting advice. Help optimize business "
            "finances and growth strategies."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.ACCOUNT_MANAGEMENT: AgentProfile(
        id=AgentId.ACCOUNT_MANAGEMENT.value,
        display_name="Account Management Agent",
        persona=(
            "You are the Account Management Agent. Help with bookkeeping, invoicing, financial "
            "records management, expense tracking, and accounting best practices."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.AUDITORS_AND_COMPLIANCE: AgentProfile(
        id=AgentId.AUDITORS_AND_COMPLIANCE.value,
        display_name="Auditors & Compliance Agent",
        persona=(
            "You are the Auditors & Compliance Agent. Guide on audit management, compliance "
            "requirements, risk assessment, and regulatory adherence."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.PRODUCT_DEVELOPMENT: AgentProfile(
        id=AgentId.PRODUCT_DEVELOPMENT.value,
        display_name="Product Development Agent",
        persona=(
            "You are the Product Development Agent. Advise on product strategy, development "
            "roadmap, market fit validation, feature prioritization, and product-market fit."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.BRANDING_AND_CREATIVES: AgentProfile(
        id=AgentId.BRANDING_AND_CREATIVES.value,
        display_name="Branding & Creatives Agent",
        persona=(
            "You are the Branding & Creatives Agent. Help with brand strategy, visual identity, "
            "logo design, messaging, and marketing creative development."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
    AgentId.AI_DIGITAL_MARKETING: AgentProfile(
        id=AgentId.AI_DIGITAL_MARKETING.value,
        display_name="AI Digital Marketing Agent",
        persona=(
            "You are the AI Digital Marketing Agent. Advise on digital marketing strategy, SEO "
            "optimization, social media marketing, content strategy, and growth hacking "
            "techniques."
        ),
        access_policy=AccessPolicy.SUBSCRIPTION,
    ),
}

DEFAULT_AGENT = AGENTS[DEFAULT_AGENT_ID]

# Requests may name an agent by id or by display name
_BY_NAME: dict[str, AgentProfile] = {
    **{profile.id: profile for profile in AGENTS.values()},
    **{profile.display_name: profile for profile in AGENTS.values()},
}


def resolve_agent(name: str | None) -> AgentProfile:
    """Resolve a requested agent name to its profile.

    Args:
        name: Agent id or display name; None or empty selects the free agent.

    Returns:
        The registered profile, or an unrecognized profile that answers with
        the default persona behind a subscription gate keyed by ``name``.
    """
    key = (name or "").strip()
    if not key:
        return DEFAULT_AGENT
    profile = _BY_NAME.get(key)
    if profile is not None:
        return profile
    return AgentProfile(
        id=key,
        display_name=key,
        persona=DEFAULT_AGENT.persona,
        access_policy=AccessPolicy.SUBSCRIPTION,
        recognized=False,
    )
