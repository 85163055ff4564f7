"""
Capstone orchestrator.

Composes the router, the fan-out orchestrator and the sequential pipeline
into one request-scoped execution: route, run the category's branch,
feed research into planning when configured, and return a structured
ExecutionRecord. Every call returns a record; failures and partial
results are labeled, never raised.
"""

import asyncio
import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from agentflow.graph.build import create_capstone_graph
from agentflow.graph.config import CapstoneConfig
from agentflow.graph.nodes import CapstoneNodes
from agentflow.graph.schemas import ExecutionRecord, ResponseStatus
from agentflow.graph.state import CapstoneState
from agentflow.parallel.orchestrator import ParallelOrchestrator
from agentflow.router.router import Router
from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.contracts.agent_result import AgentFailure, FailureKind
from agentflow.shared.llm.capability import AgentCapability
from agentflow.shared.logging.config import log_state_transition
from agentflow.workflow.pipeline import SequentialPipeline


logger = logging.getLogger(__name__)


def build_execution_record(state: Dict[str, Any]) -> ExecutionRecord:
    """Validate a (possibly partial) capstone state into an ExecutionRecord."""
    return ExecutionRecord(
        request_id=state["request_id"],
        input=state["input"],
        status=ResponseStatus(state.get("status") or ResponseStatus.FAILED.value),
        category=state.get("category"),
        routing=state.get("routing"),
        branch=state.get("branch"),
        branch_results=state.get("branch_results") or [],
        research=state.get("research"),
        pipeline=state.get("pipeline"),
        final_text=state.get("final_text") or "",
        degraded=bool(state.get("degraded")),
        notes=state.get("notes") or [],
        failure=state.get("failure"),
    )


class CapstoneOrchestrator:
    """
    Route -> branch -> (research feeds planning) -> response.

    Args:
        config: Capstone configuration; validated on construction
        capability: Agent capability shared by every engine
        settings: Timeouts. Uses DEFAULT_CONFIG if not provided.

    Raises:
        ConfigurationError: If the configuration is inconsistent
    """

    def __init__(
        self,
        config: CapstoneConfig,
        capability: AgentCapability,
        settings: Optional[OrchestratorConfig] = None,
    ):
        config.validate()
        self.config = config
        self._settings = settings or DEFAULT_CONFIG

        self.router = Router(config.router, capability, self._settings, require_dispatch=False)
        self.parallel = ParallelOrchestrator(capability, self._settings)
        self.pipelines: Dict[Enum, SequentialPipeline] = {
            category: SequentialPipeline(plan.steps, capability, self._settings)
            for category, plan in config.plans.items()
            if plan.steps
        }
        self._graph = create_capstone_graph(
            CapstoneNodes(config, self.router, self.parallel, self.pipelines)
        )

    @staticmethod
    def initial_state(text: str, request_id: str) -> CapstoneState:
        return {
            "request_id": request_id,
            "input": text,
            "category": None,
            "routing": None,
            "branch": None,
            "followup": False,
            "branch_results": [],
            "research": None,
            "pipeline": None,
            "final_text": None,
            "failure": None,
            "degraded": False,
            "status": None,
            "current_node": "starting",
            "notes": [],
        }

    async def handle(
        self,
        text: str,
        timeout: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> ExecutionRecord:
        """
        Handle one top-level request.

        A timeout cancels every in-flight agent call and returns a failed
        record holding whatever state was reached. Cancelling the awaiting
        task cancels every in-flight call and propagates.

        Args:
            text: User request
            timeout: Wall-clock limit in seconds (config default if None)
            request_id: Optional identifier; generated when not provided

        Returns:
            ExecutionRecord for the request
        """
        request_id = request_id or str(uuid.uuid4())
        timeout = self._settings.request_timeout if timeout is None else timeout
        _log = f"[request={request_id}] [graph=capstone] [api=handle] "

        initial_state = self.initial_state(text, request_id)
        snapshot: Dict[str, Any] = dict(initial_state)
        log_state_transition("request_start", initial_state)
        logger.info(f"{_log}Request starting | chars={len(text)}, timeout={timeout:.1f}s")

        async def drive() -> None:
            async for values in self._graph.astream(initial_state, stream_mode="values"):
                snapshot.update(values)

        try:
            await asyncio.wait_for(drive(), timeout=timeout)
        except asyncio.TimeoutError:
            stage = snapshot.get("current_node")
            logger.warning(f"{_log}Request timed out after {timeout:.1f}s | last_node={stage}")
            snapshot["failure"] = AgentFailure(
                kind=FailureKind.TIMEOUT,
                message=f"request exceeded {timeout:.1f}s",
            ).model_dump()
            snapshot["status"] = ResponseStatus.FAILED.value
            snapshot["notes"] = list(snapshot.get("notes") or []) + [
                f"Request timed out after {stage}"
            ]
        except asyncio.CancelledError:
            logger.warning(f"{_log}Request cancelled by caller | last_node={snapshot.get('current_node')}")
            raise

        record = build_execution_record(snapshot)
        logger.info(
            f"{_log}Request finished | status={record.status.value}, "
            f"category={record.category}, branch_results={len(record.branch_results)}"
        )
        return record

    def handle_sync(
        self,
        text: str,
        timeout: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> ExecutionRecord:
        """Blocking wrapper around handle() for callers without an event loop."""
        return asyncio.run(self.handle(text, timeout=timeout, request_id=request_id))
