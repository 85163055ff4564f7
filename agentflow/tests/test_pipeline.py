"""
Tests for the sequential pipeline.

Runs the incident planner -> executor -> reviewer workflow with scripted
agents and checks carry-forward, fail-soft steps and partial output.
"""

import pytest

from agentflow.presets.incident import incident_workflow_steps
from agentflow.shared.config import get_config
from agentflow.shared.contracts.agent_result import AgentFailure, FailureKind
from agentflow.shared.contracts.roles import AgentRole
from agentflow.shared.errors import ConfigurationError
from agentflow.shared.llm.mock import ScriptedAgentCapability, ScriptedReply
from agentflow.workflow.pipeline import SequentialPipeline
from agentflow.workflow.schemas import PipelineStatus, WorkflowStep


INCIDENT = "Users report 502 errors on login since 09:00."


# ============================================================================
# Test Fixtures
# ============================================================================


def _make_pipeline(**overrides):
    """Create the incident pipeline over scripted agents."""
    script = {
        "sre_planner": "1. Check gateway logs\n2. Check auth pods\n3. Check DB",
        "investigation_executor": "Auth pods OOM-killed since 08:58.",
        "technical_reviewer": "Findings address the incident; raise memory limits.",
    }
    script.update(overrides)
    capability = ScriptedAgentCapability(script)
    settings = get_config(step_timeout=0.5)
    return SequentialPipeline(incident_workflow_steps(), capability, settings), capability


def _role(name):
    return AgentRole(name=name, instruction=f"You are {name}.")


# ============================================================================
# TestPipelineRun
# ============================================================================


class TestPipelineRun:
    """Tests for a fully successful run."""

    @pytest.mark.asyncio
    async def test_pipeline_completes(self):
        """Every step should run in order and the last step's text is the output."""
        pipeline, capability = _make_pipeline()

        result = await pipeline.run(INCIDENT)

        assert result.status == PipelineStatus.COMPLETED
        assert result.degraded is False
        assert result.partial is False
        assert result.output == "Findings address the incident; raise memory limits."
        assert [s.ordinal for s in result.steps] == [1, 2, 3]
        assert [c.role.name for c in capability.calls] == [
            "sre_planner",
            "investigation_executor",
            "technical_reviewer",
        ]

    @pytest.mark.asyncio
    async def test_first_step_receives_request(self):
        pipeline, capability = _make_pipeline()

        await pipeline.run(INCIDENT)

        first_input = capability.calls_for("sre_planner")[0].input
        assert first_input.startswith("Produce a numbered investigation plan")
        assert INCIDENT in first_input

    @pytest.mark.asyncio
    async def test_output_carried_forward(self):
        """Each step sees the previous step's output and the original request."""
        pipeline, capability = _make_pipeline()

        await pipeline.run(INCIDENT)

        executor_input = capability.calls_for("investigation_executor")[0].input
        assert "1. Check gateway logs" in executor_input
        assert INCIDENT in executor_input
        reviewer_input = capability.calls_for("technical_reviewer")[0].input
        assert "Auth pods OOM-killed since 08:58." in reviewer_input

    @pytest.mark.asyncio
    async def test_single_step_pipeline(self):
        capability = ScriptedAgentCapability({"solo": "done"})
        pipeline = SequentialPipeline([WorkflowStep(1, _role("solo"), "Do it")], capability)

        result = await pipeline.run("task")

        assert result.output == "done"
        assert len(result.steps) == 1


# ============================================================================
# TestFailSoft
# ============================================================================


class TestFailSoft:
    """Tests for step failures that must not stop the pipeline."""

    @pytest.mark.asyncio
    async def test_middle_step_failure_carries_placeholder(self):
        """A failed step passes a placeholder on and the run is degraded."""
        pipeline, capability = _make_pipeline(
            investigation_executor=AgentFailure(kind=FailureKind.PROVIDER_ERROR, message="503"),
        )

        result = await pipeline.run(INCIDENT)

        assert result.status == PipelineStatus.DEGRADED
        assert result.degraded is True
        assert result.partial is False
        assert len(result.steps) == 3
        assert result.steps[1].result.kind == FailureKind.PROVIDER_ERROR
        reviewer_input = capability.calls_for("technical_reviewer")[0].input
        assert "step failed: provider_error" in reviewer_input
        assert result.output == "Findings address the incident; raise memory limits."
        assert result.notes == [
            "Step 2 (Execute the plan and report findings) failed: provider_error: 503"
        ]

    @pytest.mark.asyncio
    async def test_step_timeout_is_fail_soft(self):
        pipeline, capability = _make_pipeline(sre_planner=ScriptedReply("plan", delay=2.0))

        result = await pipeline.run(INCIDENT)

        assert result.steps[0].result.kind == FailureKind.TIMEOUT
        assert len(capability.calls_for("investigation_executor")) == 1
        assert result.status == PipelineStatus.DEGRADED

    @pytest.mark.asyncio
    async def test_raising_step_is_fail_soft(self):
        pipeline, _ = _make_pipeline(
            investigation_executor=ScriptedReply(raises=RuntimeError("boom")),
        )

        result = await pipeline.run(INCIDENT)

        assert result.steps[1].result.kind == FailureKind.PROVIDER_ERROR
        assert result.status == PipelineStatus.DEGRADED

    @pytest.mark.asyncio
    async def test_final_step_failure_returns_partial_output(self):
        """The last successful output is returned behind an annotation."""
        pipeline, _ = _make_pipeline(
            technical_reviewer=AgentFailure(kind=FailureKind.TIMEOUT, message="slow"),
        )

        result = await pipeline.run(INCIDENT)

        assert result.partial is True
        assert result.status == PipelineStatus.DEGRADED
        assert result.output.startswith(
            "[partial: step 3 (Review the findings for gaps and next actions) "
            "failed: timeout; showing output of step 2]"
        )
        assert result.output.endswith("Auth pods OOM-killed since 08:58.")

    @pytest.mark.asyncio
    async def test_every_step_failed(self):
        failure = AgentFailure(kind=FailureKind.PROVIDER_ERROR, message="down")
        pipeline, _ = _make_pipeline(
            sre_planner=failure,
            investigation_executor=failure,
            technical_reviewer=failure,
        )

        result = await pipeline.run(INCIDENT)

        assert result.partial is True
        assert "no step succeeded" in result.output
        assert len(result.notes) == 3
        assert all(not s.result.ok for s in result.steps)


# ============================================================================
# TestStepValidation
# ============================================================================


class TestStepValidation:
    """Tests for step list validation at construction."""

    def test_empty_pipeline_rejected(self):
        with pytest.raises(ConfigurationError):
            SequentialPipeline([], ScriptedAgentCapability())

    def test_ordinals_must_increase(self):
        steps = [
            WorkflowStep(1, _role("a"), "first"),
            WorkflowStep(1, _role("b"), "second"),
        ]
        with pytest.raises(ConfigurationError):
            SequentialPipeline(steps, ScriptedAgentCapability())

    def test_gapped_ordinals_allowed(self):
        steps = [
            WorkflowStep(10, _role("a"), "first"),
            WorkflowStep(20, _role("b"), "second"),
        ]
        pipeline = SequentialPipeline(steps, ScriptedAgentCapability())
        assert [s.ordinal for s in pipeline.steps] == [10, 20]
