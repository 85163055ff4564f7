"""
Tests for the capstone orchestrator.

Runs the travel concierge preset end to end over scripted agents: routing
to specialists, itinerary research feeding the planning pipeline,
degradation, top-level timeout and configuration validation.
"""

import asyncio
from enum import Enum

import pytest

from agentflow.graph.config import CapstoneConfig, CategoryPlan
from agentflow.graph.orchestrator import CapstoneOrchestrator
from agentflow.graph.schemas import BranchKind, ResponseStatus
from agentflow.presets.concierge import ConciergeCategory, build_concierge_config
from agentflow.router.schemas import RouterConfig
from agentflow.shared.config import get_config
from agentflow.shared.contracts.agent_result import AgentFailure, FailureKind
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError
from agentflow.shared.llm.mock import ScriptedAgentCapability, ScriptedReply
from agentflow.workflow.schemas import WorkflowStep


# ============================================================================
# Test Fixtures
# ============================================================================


def _make_script(category, **overrides):
    """Scripted concierge agents; the classifier answers with category."""
    script = {
        "concierge_classifier": category,
        "flight_specialist": "SkyHigh Airways, $450 non-stop.",
        "hotel_specialist": "Grand Plaza, $200/night.",
        "general_concierge": "Happy to help with your travels!",
        "flight_researcher": "Best flight: SkyHigh Airways $450.",
        "hotel_researcher": "Best hotel: Cozy Corner Inn $95/night.",
        "travel_package_aggregator": "Travel Package: SkyHigh + Cozy Corner, $735 total.",
        "itinerary_planner": "Day 1 arrive, Day 2 explore, Day 3 depart.",
        "itinerary_executor": "Day 1 SkyHigh 09:00, check in 18:00 ...",
        "itinerary_reviewer": "Final itinerary: no overlaps found.",
    }
    script.update(overrides)
    return script


def _make_orchestrator(category, **overrides):
    capability = ScriptedAgentCapability(_make_script(category, **overrides))
    settings = get_config(
        classification_timeout=1.0,
        specialist_timeout=5.0,
        task_timeout=5.0,
        aggregator_timeout=5.0,
        step_timeout=5.0,
        batch_timeout=0.5,
        request_timeout=10.0,
    )
    return CapstoneOrchestrator(build_concierge_config(), capability, settings), capability


def _role(name):
    return AgentRole(name=name, instruction=f"You are {name}.")


# ============================================================================
# TestSpecialistBranch
# ============================================================================


class TestSpecialistBranch:
    """Tests for categories handled by a single specialist."""

    @pytest.mark.asyncio
    async def test_flight_request(self):
        """A FLIGHT request should be answered by the flight specialist only."""
        orchestrator, capability = _make_orchestrator("FLIGHT")

        record = await orchestrator.handle("Find me a flight to Tokyo")

        assert record.status == ResponseStatus.COMPLETE
        assert record.category == ConciergeCategory.FLIGHT.value
        assert record.branch == BranchKind.SPECIALIST
        assert record.final_text == "SkyHigh Airways, $450 non-stop."
        assert [r.key for r in record.branch_results] == ["flight_specialist"]
        assert [c.role.name for c in capability.calls] == [
            "concierge_classifier",
            "flight_specialist",
        ]

    @pytest.mark.asyncio
    async def test_unknown_label_uses_default(self):
        """An unrecognized label falls back to GENERAL and says so."""
        orchestrator, _ = _make_orchestrator("CRUISE")

        record = await orchestrator.handle("Book me a cruise")

        assert record.category == ConciergeCategory.GENERAL.value
        assert record.routing.fallback_used is True
        assert record.status == ResponseStatus.COMPLETE
        assert record.final_text == "Happy to help with your travels!"
        assert record.notes[0].startswith("Classification fell back to default GENERAL")

    @pytest.mark.asyncio
    async def test_specialist_failure_fails_request(self):
        orchestrator, _ = _make_orchestrator(
            "HOTEL",
            hotel_specialist=AgentFailure(kind=FailureKind.PROVIDER_ERROR, message="503"),
        )

        record = await orchestrator.handle("I need a room in Paris")

        assert record.status == ResponseStatus.FAILED
        assert record.failure.kind == FailureKind.PROVIDER_ERROR
        assert record.final_text == ""

    @pytest.mark.asyncio
    async def test_request_id_is_kept(self):
        orchestrator, _ = _make_orchestrator("FLIGHT")

        record = await orchestrator.handle("Flight to Rome", request_id="req-42")

        assert record.request_id == "req-42"
        assert record.input == "Flight to Rome"


# ============================================================================
# TestItineraryBranch
# ============================================================================


class TestItineraryBranch:
    """Tests for research feeding the planning pipeline."""

    @pytest.mark.asyncio
    async def test_full_itinerary(self):
        """Research runs, its package seeds the planner, the reviewer answers."""
        orchestrator, capability = _make_orchestrator("ITINERARY")

        record = await orchestrator.handle("Plan 3 days in Lisbon")

        assert record.status == ResponseStatus.COMPLETE
        assert record.degraded is False
        assert record.final_text == "Final itinerary: no overlaps found."
        assert record.research.ok
        assert set(record.research.results) == {"Flights", "Hotels"}
        assert len(record.pipeline.steps) == 3

        planner_input = capability.calls_for("itinerary_planner")[0].input
        assert "Plan 3 days in Lisbon" in planner_input
        assert "Travel Package: SkyHigh + Cozy Corner, $735 total." in planner_input

        branches = [r.branch for r in record.branch_results]
        assert branches == ["parallel", "parallel", "aggregate", "pipeline", "pipeline", "pipeline"]

    @pytest.mark.asyncio
    async def test_research_timeout_degrades(self):
        """A slow researcher degrades the request but planning still runs."""
        orchestrator, _ = _make_orchestrator(
            "ITINERARY",
            hotel_researcher=ScriptedReply("hotels", delay=3.0),
        )

        record = await orchestrator.handle("Plan 3 days in Lisbon")

        assert record.status == ResponseStatus.DEGRADED
        assert record.degraded is True
        assert record.research.failed_keys == ["Hotels"]
        assert any(n.startswith("Hotels unavailable: timeout") for n in record.notes)
        assert record.final_text == "Final itinerary: no overlaps found."

    @pytest.mark.asyncio
    async def test_all_research_failed_plans_from_request(self):
        """With no research at all, the pipeline starts from the raw request."""
        failure = AgentFailure(kind=FailureKind.PROVIDER_ERROR, message="down")
        orchestrator, capability = _make_orchestrator(
            "ITINERARY",
            flight_researcher=failure,
            hotel_researcher=failure,
        )

        record = await orchestrator.handle("Plan 3 days in Lisbon")

        assert record.status == ResponseStatus.DEGRADED
        assert record.failure is None
        assert capability.calls_for("travel_package_aggregator") == []
        planner_input = capability.calls_for("itinerary_planner")[0].input
        assert "Research findings" not in planner_input
        assert any("planning from the original request" in n for n in record.notes)

    @pytest.mark.asyncio
    async def test_pipeline_step_failure_degrades(self):
        orchestrator, _ = _make_orchestrator(
            "ITINERARY",
            itinerary_reviewer=AgentFailure(kind=FailureKind.TIMEOUT, message="slow"),
        )

        record = await orchestrator.handle("Plan 3 days in Lisbon")

        assert record.status == ResponseStatus.DEGRADED
        assert record.pipeline.partial is True
        assert record.final_text.startswith("[partial: step 3")


# ============================================================================
# TestRequestLifecycle
# ============================================================================


class TestRequestLifecycle:
    """Tests for the top-level timeout, cancellation and sync entry point."""

    @pytest.mark.asyncio
    async def test_request_timeout_returns_failed_record(self):
        """A request over its limit returns a failed record with the state reached."""
        orchestrator, capability = _make_orchestrator(
            "FLIGHT",
            flight_specialist=ScriptedReply("late", delay=2.0),
        )

        record = await orchestrator.handle("Find me a flight", timeout=0.3)

        assert record.status == ResponseStatus.FAILED
        assert record.failure.kind == FailureKind.TIMEOUT
        assert record.category == ConciergeCategory.FLIGHT.value
        assert record.notes[-1] == "Request timed out after classify"

        await asyncio.sleep(2.0)
        assert "flight_specialist" not in capability.completed

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self):
        orchestrator, capability = _make_orchestrator(
            "ITINERARY",
            flight_researcher=ScriptedReply("flights", delay=1.0),
            hotel_researcher=ScriptedReply("hotels", delay=1.0),
        )

        task = asyncio.create_task(orchestrator.handle("Plan 3 days in Lisbon"))
        await asyncio.sleep(0.2)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await asyncio.sleep(1.2)
        assert "flight_researcher" not in capability.completed
        assert "hotel_researcher" not in capability.completed

    def test_handle_sync(self):
        orchestrator, _ = _make_orchestrator("HOTEL")

        record = orchestrator.handle_sync("I need a room in Paris")

        assert record.status == ResponseStatus.COMPLETE
        assert record.final_text == "Grand Plaza, $200/night."


# ============================================================================
# TestCapstoneConfig
# ============================================================================


class Desk(str, Enum):
    OPS = "OPS"
    OTHER = "OTHER"


def _desk_router(dispatch):
    return RouterConfig(
        categories=Desk,
        default=Desk.OTHER,
        classifier=_role("desk_classifier"),
        dispatch=dispatch,
    )


class TestCapstoneConfig:
    """Tests for configuration validation and pipeline-only plans."""

    def test_specialist_category_needs_role(self):
        config = CapstoneConfig(router=_desk_router({Desk.OPS: _role("ops")}))
        with pytest.raises(ConfigurationError):
            CapstoneOrchestrator(config, ScriptedAgentCapability())

    def test_parallel_plan_needs_aggregator(self):
        config = CapstoneConfig(
            router=_desk_router({Desk.OTHER: _role("other")}),
            plans={Desk.OPS: CategoryPlan(branch=BranchKind.PARALLEL, fan_out={"a": _role("a")})},
        )
        with pytest.raises(ConfigurationError):
            CapstoneOrchestrator(config, ScriptedAgentCapability())

    def test_plan_outside_category_set(self):
        config = CapstoneConfig(
            router=_desk_router({Desk.OPS: _role("ops"), Desk.OTHER: _role("other")}),
            plans={ConciergeCategory.FLIGHT: CategoryPlan()},
        )
        with pytest.raises(ConfigurationError):
            CapstoneOrchestrator(config, ScriptedAgentCapability())

    @pytest.mark.asyncio
    async def test_pipeline_plan(self):
        """A PIPELINE category runs its steps directly on the request."""
        config = CapstoneConfig(
            router=_desk_router({Desk.OTHER: _role("other")}),
            plans={
                Desk.OPS: CategoryPlan(
                    branch=BranchKind.PIPELINE,
                    steps=(
                        WorkflowStep(1, _role("plan"), "Plan"),
                        WorkflowStep(2, _role("act"), "Act"),
                    ),
                )
            },
        )
        capability = ScriptedAgentCapability(
            {"desk_classifier": "OPS", "plan": "the plan", "act": "acted"}
        )
        orchestrator = CapstoneOrchestrator(config, capability)

        record = await orchestrator.handle("restart the cluster")

        assert record.branch == BranchKind.PIPELINE
        assert record.status == ResponseStatus.COMPLETE
        assert record.final_text == "acted"
        assert [r.key for r in record.branch_results] == ["1:plan", "2:act"]
        assert record.research is None
