"""
Node functions for the capstone graph.

Each node delegates to one of the three engines (router, fan-out,
pipeline) and records its results in the capstone state. Nodes never raise
for agent failures; they record them as notes, failures or a degraded flag.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping

from agentflow.graph.config import CapstoneConfig
from agentflow.graph.prompts import build_research_handoff
from agentflow.graph.schemas import BranchKind, BranchResult, ResponseStatus
from agentflow.graph.state import CapstoneState
from agentflow.parallel.orchestrator import ParallelOrchestrator
from agentflow.parallel.schemas import BatchOutcome, ParallelTask
from agentflow.router.router import Router
from agentflow.shared.logging.config import log_state_transition
from agentflow.workflow.pipeline import SequentialPipeline


logger = logging.getLogger(__name__)


class CapstoneNodes:
    """
    Node functions bound to one orchestrator's engines.

    Args:
        config: Validated capstone configuration
        router: Router over the configured category set
        parallel: Fan-out orchestrator
        pipelines: Compiled pipeline per category with steps
    """

    def __init__(
        self,
        config: CapstoneConfig,
        router: Router,
        parallel: ParallelOrchestrator,
        pipelines: Mapping[Enum, SequentialPipeline],
    ):
        self.config = config
        self.router = router
        self.parallel = parallel
        self.pipelines = pipelines

    def _category(self, state: CapstoneState) -> Enum:
        return self.config.router.categories(state["category"])

    async def classify(self, state: CapstoneState) -> Dict[str, Any]:
        """Classify the request and record the chosen branch."""
        request_id = state["request_id"]
        _log = f"[request={request_id}] [graph=capstone] [node=classify] "
        logger.info(f"{_log}Entering node | chars={len(state['input'])}")

        decision = await self.router.classify(state["input"], request_id=request_id)
        category = self.config.router.categories(decision.category)
        plan = self.config.plan_for(category)

        notes = []
        if decision.fallback_used:
            notes.append(
                f"Classification fell back to default {decision.category}: "
                f"{decision.classification.describe()}"
            )
        logger.info(
            f"{_log}Category -> {decision.category} | branch={plan.branch.value}, "
            f"fallback={decision.fallback_used}"
        )
        return {
            "category": decision.category,
            "routing": decision.model_dump(),
            "branch": plan.branch.value,
            "followup": plan.has_followup,
            "notes": notes,
            "current_node": "classify",
        }

    async def specialist(self, state: CapstoneState) -> Dict[str, Any]:
        """Dispatch the request to the category's specialist."""
        request_id = state["request_id"]
        _log = f"[request={request_id}] [graph=capstone] [node=specialist] "
        category = self._category(state)
        specialist = self.config.router.specialist_for(category)
        logger.info(f"{_log}Entering node | specialist={specialist.name}")

        result = await self.router.dispatch(state["input"], category, request_id=request_id)
        update: Dict[str, Any] = {
            "branch_results": [
                BranchResult(
                    branch=BranchKind.SPECIALIST.value,
                    key=specialist.name,
                    result=result,
                ).model_dump()
            ],
            "current_node": "specialist",
        }
        if result.ok:
            update["final_text"] = result.text
        else:
            logger.warning(f"{_log}Specialist failed -> surfacing failure: {result.describe()}")
            update["failure"] = result.model_dump()
            update["notes"] = [f"Specialist {specialist.name} failed: {result.describe()}"]
        return update

    async def research(self, state: CapstoneState) -> Dict[str, Any]:
        """Fan out the category's research roles and aggregate the findings."""
        request_id = state["request_id"]
        _log = f"[request={request_id}] [graph=capstone] [node=research] "
        plan = self.config.plan_for(self._category(state))
        logger.info(f"{_log}Entering node | fan_out={sorted(plan.fan_out)}")

        tasks = [
            ParallelTask(key=key, role=role, input=state["input"])
            for key, role in plan.fan_out.items()
        ]
        outcome = await self.parallel.fan_out_and_aggregate(
            tasks,
            plan.aggregator,
            batch_timeout=plan.batch_timeout,
            subject=state["input"],
            request_id=request_id,
        )

        branch_results = [
            BranchResult(branch=BranchKind.PARALLEL.value, key=key, result=outcome.results[key]).model_dump()
            for key in sorted(outcome.results)
        ]
        notes = list(outcome.notes)
        update: Dict[str, Any] = {
            "research": outcome.model_dump(),
            "degraded": state.get("degraded", False) or outcome.degraded,
            "current_node": "research",
        }
        if outcome.aggregated:
            branch_results.append(
                BranchResult(branch="aggregate", key=plan.aggregator.name, result=outcome.aggregate).model_dump()
            )

        if outcome.ok:
            update["final_text"] = outcome.aggregate.text
        elif plan.has_followup:
            notes.append(
                f"Research unavailable ({outcome.aggregate.describe()}); "
                f"planning from the original request"
            )
            update["degraded"] = True
        else:
            logger.warning(f"{_log}Research failed -> surfacing failure: {outcome.aggregate.describe()}")
            update["failure"] = outcome.aggregate.model_dump()

        update["branch_results"] = branch_results
        update["notes"] = notes
        return update

    async def workflow(self, state: CapstoneState) -> Dict[str, Any]:
        """Run the category's pipeline, seeded with research when available."""
        request_id = state["request_id"]
        _log = f"[request={request_id}] [graph=capstone] [node=workflow] "
        pipeline = self.pipelines[self._category(state)]

        research = state.get("research")
        outcome = BatchOutcome.model_validate(research) if research is not None else None
        seeded = outcome is not None and outcome.ok
        if seeded:
            initial_input = build_research_handoff(state["input"], outcome.aggregate.text)
        else:
            initial_input = state["input"]
        logger.info(
            f"{_log}Entering node | steps={len(pipeline.steps)}, "
            f"seeded_with_research={seeded}"
        )

        result = await pipeline.run(initial_input, request_id=request_id)
        return {
            "pipeline": result.model_dump(),
            "branch_results": [
                BranchResult(
                    branch=BranchKind.PIPELINE.value,
                    key=f"{step.ordinal}:{step.role}",
                    result=step.result,
                ).model_dump()
                for step in result.steps
            ],
            "final_text": result.output,
            "degraded": state.get("degraded", False) or result.degraded,
            "notes": list(result.notes),
            "current_node": "workflow",
        }

    def assemble(self, state: CapstoneState) -> Dict[str, Any]:
        """Label the assembled response with its final status."""
        request_id = state["request_id"]
        _log = f"[request={request_id}] [graph=capstone] [node=assemble] "

        if state.get("failure") is not None:
            status = ResponseStatus.FAILED
        elif state.get("degraded"):
            status = ResponseStatus.DEGRADED
        else:
            status = ResponseStatus.COMPLETE

        logger.info(
            f"{_log}Request complete | category={state.get('category')}, "
            f"branch={state.get('branch')}, status={status.value}, "
            f"results={len(state.get('branch_results', []))} -> END"
        )
        log_state_transition("request_complete", {**state, "status": status.value})
        return {"status": status.value, "current_node": "complete"}
