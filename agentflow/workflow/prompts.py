"""
Prompt rendering for pipeline steps.
"""

from agentflow.workflow.schemas import WorkflowStep


FIRST_STEP_TEMPLATE = """{description}

Request:
{initial_input}"""

STEP_TEMPLATE = """{description}

Original request:
{initial_input}

Output of the previous stage:
{carried}"""

PARTIAL_TEMPLATE = "[partial: step {ordinal} ({description}) failed: {kind}; {source}]"


def build_step_input(
    step: WorkflowStep,
    initial_input: str,
    carried: str,
    first: bool,
) -> str:
    """Compose a step's input from its description and the carried text."""
    if first:
        return FIRST_STEP_TEMPLATE.format(
            description=step.description,
            initial_input=initial_input,
        )
    return STEP_TEMPLATE.format(
        description=step.description,
        initial_input=initial_input,
        carried=carried,
    )
