"""
Schemas for the router.

Defines the router's configuration (closed category set, default, and
dispatch table) and the routing decision it produces.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Type

from pydantic import BaseModel, Field

from agentflow.shared.contracts.agent_result import AgentResult
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError


@dataclass(frozen=True)
class RouterConfig:
    """
    Configuration for one router instance.

    Attributes:
        categories: Enum class holding the closed category set
        default: Member used whenever classification does not yield a member
        classifier: Role that returns exactly one label from the set
        dispatch: Specialist role for every member of the set
    """

    categories: Type[Enum]
    default: Enum
    classifier: AgentRole
    dispatch: Dict[Enum, AgentRole] = field(default_factory=dict)

    def validate(self, require_dispatch: bool = True) -> None:
        """
        Check the configuration before any request is served.

        Args:
            require_dispatch: Require a specialist for every member. Composed
                orchestrators that handle some members themselves pass False.

        Raises:
            ConfigurationError: If the default or the dispatch table does not
                match the category set
        """
        members = list(self.categories)
        if not members:
            raise ConfigurationError(f"Category set {self.categories.__name__} is empty")
        if self.default not in members:
            raise ConfigurationError(
                f"Default category {self.default!r} is not a member of {self.categories.__name__}"
            )
        foreign = [key for key in self.dispatch if key not in members]
        if foreign:
            raise ConfigurationError(
                f"Dispatch table names categories outside {self.categories.__name__}: {foreign}"
            )
        missing = [m.name for m in members if m not in self.dispatch]
        if require_dispatch and missing:
            raise ConfigurationError(f"No specialist role configured for categories: {missing}")

    def specialist_for(self, category: Enum) -> AgentRole:
        try:
            return self.dispatch[category]
        except KeyError:
            raise ConfigurationError(f"No specialist role configured for {category!r}") from None


class RoutingDecision(BaseModel):
    """Outcome of one classification step."""

    category: str = Field(description="Value of the chosen category member")
    raw_label: Optional[str] = Field(
        default=None, description="Classifier output before normalization"
    )
    fallback_used: bool = Field(
        default=False, description="True when the default category was applied"
    )
    classification: AgentResult = Field(description="Result of the classification call")
