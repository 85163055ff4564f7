"""
Configuration for the capstone orchestrator.

Maps every category of the router's closed set to a handling plan:
a direct specialist dispatch, a fan-out batch (optionally followed by a
pipeline), or a pipeline. Validated once at startup.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from agentflow.graph.schemas import BranchKind
from agentflow.router.schemas import RouterConfig
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError
from agentflow.workflow.schemas import WorkflowStep, validate_steps


@dataclass(frozen=True)
class CategoryPlan:
    """
    How one category is handled.

    Attributes:
        branch: Branch kind
        fan_out: Task key -> role, for PARALLEL plans
        aggregator: Role combining the fan-out findings, for PARALLEL plans
        steps: Pipeline steps; the main work of PIPELINE plans, and the
            follow-up planning stage of PARALLEL plans
        batch_timeout: Optional batch timeout overriding the config default
    """

    branch: BranchKind = BranchKind.SPECIALIST
    fan_out: Dict[str, AgentRole] = field(default_factory=dict)
    aggregator: Optional[AgentRole] = None
    steps: Tuple[WorkflowStep, ...] = ()
    batch_timeout: Optional[float] = None

    def validate(self, category: Enum) -> None:
        label = getattr(category, "value", category)
        if self.branch == BranchKind.PARALLEL:
            if not self.fan_out:
                raise ConfigurationError(f"Parallel plan for {label} has no fan-out roles")
            if self.aggregator is None:
                raise ConfigurationError(f"Parallel plan for {label} has no aggregator role")
        elif self.branch == BranchKind.PIPELINE:
            if not self.steps:
                raise ConfigurationError(f"Pipeline plan for {label} has no steps")
        elif self.fan_out or self.steps:
            raise ConfigurationError(
                f"Specialist plan for {label} must not define fan-out roles or steps"
            )
        if self.steps:
            validate_steps(self.steps)

    @property
    def has_followup(self) -> bool:
        return self.branch == BranchKind.PARALLEL and bool(self.steps)


SPECIALIST_PLAN = CategoryPlan()


@dataclass(frozen=True)
class CapstoneConfig:
    """
    Configuration for the capstone orchestrator.

    Attributes:
        router: Router configuration (closed set, default, dispatch table)
        plans: Plan per category; categories without a plan are dispatched
            to their specialist
    """

    router: RouterConfig
    plans: Dict[Enum, CategoryPlan] = field(default_factory=dict)

    def plan_for(self, category: Enum) -> CategoryPlan:
        return self.plans.get(category, SPECIALIST_PLAN)

    def validate(self) -> None:
        """
        Check the configuration before any request is served.

        Raises:
            ConfigurationError: If a plan is inconsistent or a specialist
                category has no dispatch role
        """
        self.router.validate(require_dispatch=False)
        members = list(self.router.categories)
        for category, plan in self.plans.items():
            if category not in members:
                raise ConfigurationError(
                    f"Plan names a category outside {self.router.categories.__name__}: {category!r}"
                )
            plan.validate(category)
        for category in members:
            if self.plan_for(category).branch == BranchKind.SPECIALIST:
                self.router.specialist_for(category)
