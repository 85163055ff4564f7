"""
Classification-based router.

Classifies input into a closed category set and dispatches it to the
matching specialist role.
"""

from agentflow.router.router import Router, normalize_label
from agentflow.router.schemas import RouterConfig, RoutingDecision

__all__ = ["Router", "RouterConfig", "RoutingDecision", "normalize_label"]
