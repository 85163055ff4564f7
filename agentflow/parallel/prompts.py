"""
Prompt rendering for the aggregator agent.
"""

from typing import Mapping, Optional

from agentflow.shared.contracts.agent_result import AgentResult


AGGREGATION_TEMPLATE = """{subject_block}Findings from {count} independent analyses follow.
Some sources may be marked UNAVAILABLE; reason about the missing data explicitly
instead of guessing what it would have said.

{findings}"""


def render_finding(key: str, result: AgentResult) -> str:
    if result.ok:
        return f"### {key}\n{result.text}"
    return f"### {key}\nUNAVAILABLE ({result.kind.value}): {result.message or 'no detail'}"


def render_aggregation_input(
    results: Mapping[str, AgentResult],
    subject: Optional[str] = None,
) -> str:
    """
    Render the per-key result map as the aggregator's input text.

    Keys are rendered in sorted order so the text does not depend on
    completion order.
    """
    findings = "\n\n".join(render_finding(key, results[key]) for key in sorted(results))
    subject_block = f"Subject:\n{subject}\n\n" if subject else ""
    return AGGREGATION_TEMPLATE.format(
        subject_block=subject_block,
        count=len(results),
        findings=findings,
    )


def unavailable_note(key: str, result: AgentResult) -> str:
    return f"{key} unavailable: {result.describe()}"
