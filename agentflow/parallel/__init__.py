"""
Parallel fan-out orchestrator.

Runs independent agent calls concurrently and aggregates the results with
partial-failure tolerance.
"""

from agentflow.parallel.orchestrator import ParallelOrchestrator, select_batch_failure, validate_batch
from agentflow.parallel.schemas import AggregationInput, BatchOutcome, ParallelTask

__all__ = [
    "ParallelOrchestrator",
    "ParallelTask",
    "AggregationInput",
    "BatchOutcome",
    "select_batch_failure",
    "validate_batch",
]
