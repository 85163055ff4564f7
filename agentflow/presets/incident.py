"""
Incident investigation preset.

Two shapes over the same incident description:
- a fan-out batch of log, metrics and database analysts combined by an
  incident commander into one root cause analysis
- a planner -> executor -> reviewer pipeline producing an investigation
  plan, its findings and a review of the gaps
"""

from typing import List, Tuple

from agentflow.parallel.schemas import ParallelTask
from agentflow.shared.contracts.roles import AgentRole, RoleRegistry
from agentflow.workflow.schemas import WorkflowStep


INCIDENT_ROLES = RoleRegistry(
    [
        AgentRole(
            name="log_analyst",
            instruction=(
                "You are a log analysis expert.\n"
                "Analyze logs related to the incident described by the user."
            ),
        ),
        AgentRole(
            name="metrics_analyst",
            instruction=(
                "You are a performance engineer.\n"
                "Analyze system metrics for the incident described by the user."
            ),
        ),
        AgentRole(
            name="database_analyst",
            instruction=(
                "You are a database expert.\n"
                "Analyze database-related causes for the incident described by the user."
            ),
        ),
        AgentRole(
            name="incident_commander",
            instruction=(
                "You are an incident commander.\n"
                "Combine the findings you are given into a single root cause analysis. "
                "Findings marked UNAVAILABLE could not be collected; say which sources "
                "are missing and how that limits the conclusion."
            ),
        ),
        AgentRole(
            name="sre_planner",
            instruction=(
                "You are a senior SRE.\n"
                "Analyze the incident and produce a numbered investigation plan.\n"
                "Rules:\n"
                "- Max 3 steps\n"
                "- Each step must be concrete and actionable"
            ),
        ),
        AgentRole(
            name="investigation_executor",
            instruction=(
                "You are a software engineer.\n"
                "Execute the investigation steps you are given and explain findings."
            ),
        ),
        AgentRole(
            name="technical_reviewer",
            instruction=(
                "You are a technical reviewer.\n"
                "Tasks:\n"
                "- Check if the findings fully address the incident\n"
                "- Identify gaps\n"
                "- Suggest next actions"
            ),
        ),
    ]
)

# Task key -> analyst role name
ANALYSTS: Tuple[Tuple[str, str], ...] = (
    ("Logs", "log_analyst"),
    ("Metrics", "metrics_analyst"),
    ("Database", "database_analyst"),
)


def incident_tasks(incident: str, roles: RoleRegistry = INCIDENT_ROLES) -> List[ParallelTask]:
    """One analysis task per source, all over the same incident text."""
    return [ParallelTask(key=key, role=roles.get(name), input=incident) for key, name in ANALYSTS]


def incident_aggregator(roles: RoleRegistry = INCIDENT_ROLES) -> AgentRole:
    return roles.get("incident_commander")


def incident_workflow_steps(roles: RoleRegistry = INCIDENT_ROLES) -> List[WorkflowStep]:
    return [
        WorkflowStep(1, roles.get("sre_planner"), "Produce a numbered investigation plan"),
        WorkflowStep(2, roles.get("investigation_executor"), "Execute the plan and report findings"),
        WorkflowStep(3, roles.get("technical_reviewer"), "Review the findings for gaps and next actions"),
    ]
