"""
Customer-support router preset.

Classifies support requests as TECHNICAL, BILLING or GENERAL and
dispatches each to its specialist. GENERAL is the fallback for anything
the classifier does not label exactly.
"""

from enum import Enum

from agentflow.router.prompts import build_classifier_instruction
from agentflow.router.schemas import RouterConfig
from agentflow.shared.contracts.roles import AgentRole, RoleRegistry


class SupportCategory(str, Enum):
    TECHNICAL = "TECHNICAL"
    BILLING = "BILLING"
    GENERAL = "GENERAL"


SUPPORT_DESCRIPTIONS = {
    SupportCategory.TECHNICAL: "Issues with software, bugs, installation, or performance.",
    SupportCategory.BILLING: "Questions about invoices, payments, subscriptions, or refunds.",
    SupportCategory.GENERAL: "Anything else.",
}

SUPPORT_ROLES = RoleRegistry(
    [
        AgentRole(
            name="support_classifier",
            instruction=build_classifier_instruction(SupportCategory, SUPPORT_DESCRIPTIONS),
            temperature=0.0,
        ),
        AgentRole(
            name="technical_support",
            instruction=(
                "You are a Technical Support Expert. Provide detailed technical "
                "troubleshooting steps for the user's issue."
            ),
        ),
        AgentRole(
            name="billing_support",
            instruction=(
                "You are a Billing Specialist. Answer questions about invoices, payments, "
                "and subscriptions with a professional and helpful tone."
            ),
        ),
        AgentRole(
            name="general_support",
            instruction=(
                "You are a Helpful Customer Service Representative. Handle general "
                "inquiries, appreciation, or miscellaneous questions."
            ),
        ),
    ]
)


def build_support_router_config(roles: RoleRegistry = SUPPORT_ROLES) -> RouterConfig:
    return RouterConfig(
        categories=SupportCategory,
        default=SupportCategory.GENERAL,
        classifier=roles.get("support_classifier"),
        dispatch={
            SupportCategory.TECHNICAL: roles.get("technical_support"),
            SupportCategory.BILLING: roles.get("billing_support"),
            SupportCategory.GENERAL: roles.get("general_support"),
        },
    )
