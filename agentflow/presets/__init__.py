"""
Ready-made configurations:
- support: TECHNICAL / BILLING / GENERAL customer-support router
- incident: log/metrics/database fan-out and planner/executor/reviewer pipeline
- concierge: travel concierge capstone (route -> research -> refine)
"""

from agentflow.presets.concierge import ConciergeCategory, build_concierge_config
from agentflow.presets.incident import (
    incident_aggregator,
    incident_tasks,
    incident_workflow_steps,
)
from agentflow.presets.support import SupportCategory, build_support_router_config

__all__ = [
    "ConciergeCategory",
    "build_concierge_config",
    "incident_aggregator",
    "incident_tasks",
    "incident_workflow_steps",
    "SupportCategory",
    "build_support_router_config",
]
