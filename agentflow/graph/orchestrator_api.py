"""
FastAPI endpoints for the orchestration engines.

Exposes the shipped presets:
- /run: travel concierge capstone (route -> research -> refine)
- /route: customer-support router
- /investigate: incident fan-out with root cause aggregation
- /workflow: incident planner -> executor -> reviewer pipeline

Agent failures are part of every response body. Only unexpected errors
are reported as HTTP 500.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from agentflow.graph.orchestrator import CapstoneOrchestrator
from agentflow.graph.schemas import ExecutionRecord
from agentflow.parallel.orchestrator import ParallelOrchestrator
from agentflow.parallel.schemas import BatchOutcome
from agentflow.presets.concierge import build_concierge_config
from agentflow.presets.incident import incident_aggregator, incident_tasks, incident_workflow_steps
from agentflow.presets.support import build_support_router_config
from agentflow.router.router import Router
from agentflow.router.schemas import RoutingDecision
from agentflow.shared.config import DEFAULT_CONFIG, use_mock_llm
from agentflow.shared.contracts.agent_result import AgentResult
from agentflow.shared.llm import OpenAIAgentCapability, ScriptedAgentCapability
from agentflow.shared.llm.capability import AgentCapability
from agentflow.workflow.pipeline import SequentialPipeline
from agentflow.workflow.schemas import PipelineResult


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orchestrator", tags=["orchestrator"])


# Capability instance (shared across requests)
_capability: Optional[AgentCapability] = None


def get_capability() -> AgentCapability:
    """Get or create the shared agent capability."""
    global _capability
    if _capability is None:
        if use_mock_llm():
            logger.info("AGENTFLOW_MOCK_LLM set -> serving scripted agent replies")
            _capability = ScriptedAgentCapability()
        else:
            _capability = OpenAIAgentCapability()
    return _capability


# ============================================================================
# Request/Response Models
# ============================================================================


class RunRequest(BaseModel):
    """Request to run the travel concierge."""

    input: str = Field(min_length=1, description="Traveler request")
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Wall-clock limit in seconds"
    )


class RouteRequest(BaseModel):
    """Request to route a support message."""

    input: str = Field(min_length=1, description="Customer message")


class RouteResponse(BaseModel):
    """Routing decision and the specialist's answer."""

    request_id: str
    decision: RoutingDecision
    result: AgentResult


class IncidentRequest(BaseModel):
    """Request to investigate an incident."""

    incident: str = Field(min_length=1, description="Incident description")
    batch_timeout: Optional[float] = Field(
        default=None, gt=0, description="Fan-out batch timeout in seconds"
    )


class InvestigateResponse(BaseModel):
    request_id: str
    outcome: BatchOutcome


class WorkflowResponse(BaseModel):
    request_id: str
    result: PipelineResult


def _internal_error(_log: str, what: str, error: Exception) -> HTTPException:
    logger.exception(f"{_log}{what} failed: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{what} failed: {str(error)}",
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/run", response_model=ExecutionRecord)
async def run_concierge(
    request: RunRequest,
    capability: AgentCapability = Depends(get_capability),
) -> ExecutionRecord:
    """
    Run the full concierge flow.

    Returns the ExecutionRecord; degraded and failed requests are reported
    through its status, not through the HTTP status code.
    """
    request_id = str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=capstone] [api=run] "
    try:
        orchestrator = CapstoneOrchestrator(build_concierge_config(), capability, DEFAULT_CONFIG)
        return await orchestrator.handle(request.input, timeout=request.timeout, request_id=request_id)
    except Exception as e:
        raise _internal_error(_log, "Concierge execution", e)


@router.post("/route", response_model=RouteResponse)
async def route_support(
    request: RouteRequest,
    capability: AgentCapability = Depends(get_capability),
) -> RouteResponse:
    """Classify a support message and answer it with the matching specialist."""
    request_id = str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=router] [api=route] "
    try:
        support_router = Router(build_support_router_config(), capability, DEFAULT_CONFIG)
        decision, result = await support_router.handle(request.input, request_id=request_id)
    except Exception as e:
        raise _internal_error(_log, "Routing", e)

    logger.info(
        f"{_log}Routing complete | category={decision.category}, "
        f"fallback={decision.fallback_used}, ok={result.ok}"
    )
    return RouteResponse(request_id=request_id, decision=decision, result=result)


@router.post("/investigate", response_model=InvestigateResponse)
async def investigate_incident(
    request: IncidentRequest,
    capability: AgentCapability = Depends(get_capability),
) -> InvestigateResponse:
    """Analyze an incident from logs, metrics and database in parallel."""
    request_id = str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=parallel] [api=investigate] "
    try:
        parallel = ParallelOrchestrator(capability, DEFAULT_CONFIG)
        outcome = await parallel.fan_out_and_aggregate(
            incident_tasks(request.incident),
            incident_aggregator(),
            batch_timeout=request.batch_timeout,
            subject=request.incident,
            request_id=request_id,
        )
    except Exception as e:
        raise _internal_error(_log, "Investigation", e)
    return InvestigateResponse(request_id=request_id, outcome=outcome)


@router.post("/workflow", response_model=WorkflowResponse)
async def incident_workflow(
    request: IncidentRequest,
    capability: AgentCapability = Depends(get_capability),
) -> WorkflowResponse:
    """Plan, execute and review an incident investigation."""
    request_id = str(uuid.uuid4())
    _log = f"[request={request_id}] [graph=pipeline] [api=workflow] "
    try:
        pipeline = SequentialPipeline(incident_workflow_steps(), capability, DEFAULT_CONFIG)
        result = await pipeline.run(request.incident, request_id=request_id)
    except Exception as e:
        raise _internal_error(_log, "Workflow", e)
    return WorkflowResponse(request_id=request_id, result=result)


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "agent": "orchestrator"}
