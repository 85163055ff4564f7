"""
Agent orchestration engine.

This package contains:
- shared/: Common infrastructure (agent capability, logging, contracts, config)
- router/: Classification-based routing to specialists
- parallel/: Fan-out with batch timeout and partial-failure aggregation
- workflow/: Fail-soft sequential pipeline
- graph/: Capstone orchestrator (route -> research -> refine) and its API
- presets/: Support, incident and travel concierge configurations
"""

from agentflow.graph.orchestrator import CapstoneOrchestrator
from agentflow.parallel.orchestrator import ParallelOrchestrator
from agentflow.router.router import Router
from agentflow.workflow.pipeline import SequentialPipeline

__all__ = ["CapstoneOrchestrator", "ParallelOrchestrator", "Router", "SequentialPipeline"]
