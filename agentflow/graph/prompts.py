"""
Prompt rendering for capstone hand-offs.
"""

RESEARCH_HANDOFF_TEMPLATE = """{request}

Research findings gathered for this request:
{findings}"""


def build_research_handoff(request: str, findings: str) -> str:
    """Compose the pipeline input from the request and the aggregated research."""
    return RESEARCH_HANDOFF_TEMPLATE.format(request=request, findings=findings)
