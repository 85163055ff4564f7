"""
Capstone state schema.

Defines the per-request state that flows through the capstone graph. It
is the request's execution record while the graph runs: created at entry,
populated node by node, and turned into an ExecutionRecord at the end.
"""

from typing import TypedDict, List, Optional, Annotated
import operator


class CapstoneState(TypedDict):
    """
    State schema for the capstone graph.

    Branch outputs are stored as plain dicts (model_dump of the result
    contracts) and validated again when the record is assembled.
    """

    # Request context
    request_id: str
    input: str

    # Routing decision (populated by classify)
    category: Optional[str]
    routing: Optional[dict]
    branch: Optional[str]
    followup: bool

    # Branch outputs
    branch_results: Annotated[List[dict], operator.add]
    research: Optional[dict]
    pipeline: Optional[dict]

    # Final response
    final_text: Optional[str]
    failure: Optional[dict]
    degraded: bool
    status: Optional[str]

    # Tracking
    current_node: str
    notes: Annotated[List[str], operator.add]
