"""
Prompt builders for the router's classification role.
"""

from enum import Enum
from typing import Mapping, Optional, Type


CLASSIFIER_TEMPLATE = """Classify the user input into exactly one of these categories:
{category_lines}

Return ONLY the category name in uppercase. Return exactly one label from the list above, nothing else."""


def build_classifier_instruction(
    categories: Type[Enum],
    descriptions: Optional[Mapping[Enum, str]] = None,
) -> str:
    """
    Build the system instruction for a closed-set classifier.

    Args:
        categories: Enum class holding the closed category set
        descriptions: Optional one-line description per member

    Returns:
        Instruction text listing every label
    """
    descriptions = descriptions or {}
    lines = []
    for member in categories:
        description = descriptions.get(member)
        if description:
            lines.append(f"- {member.value}: {description}")
        else:
            lines.append(f"- {member.value}")
    return CLASSIFIER_TEMPLATE.format(category_lines="\n".join(lines))
