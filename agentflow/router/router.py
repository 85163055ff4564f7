"""
Classification-based router.

Classifies an input into one member of a closed category set with a
single agent call, then dispatches the input to that category's
specialist. Classification is fail-safe: anything other than an exact
label match resolves to the configured default. Specialist failures are
returned to the caller unchanged.
"""

import logging
import re
from enum import Enum
from typing import Optional, Tuple

from agentflow.router.schemas import RouterConfig, RoutingDecision
from agentflow.shared.config import DEFAULT_CONFIG, OrchestratorConfig
from agentflow.shared.contracts.agent_result import (
    AgentFailure,
    AgentResult,
    FailureKind,
)
from agentflow.shared.llm.capability import AgentCapability, invoke_guarded


logger = logging.getLogger(__name__)

_STRIP_CHARS = " \t\r\n\"'`*_.:;,!()[]{}<>"


def normalize_label(raw: str) -> str:
    """
    Canonicalize a classifier label for matching.

    Trims whitespace, surrounding quotes, markdown emphasis and trailing
    punctuation, uppercases, and joins words with underscores.

    Args:
        raw: Raw classifier output

    Returns:
        Canonical label (may be empty)
    """
    label = raw.strip().strip(_STRIP_CHARS)
    label = re.sub(r"[\s\-]+", "_", label)
    return label.upper()


class Router:
    """
    Routes inputs to specialists over a closed category set.

    Args:
        config: Router configuration; validated on construction
        capability: Agent capability used for both calls
        settings: Timeouts. Uses DEFAULT_CONFIG if not provided.
        require_dispatch: Require a specialist for every category

    Raises:
        ConfigurationError: If the router configuration is inconsistent
    """

    def __init__(
        self,
        config: RouterConfig,
        capability: AgentCapability,
        settings: Optional[OrchestratorConfig] = None,
        require_dispatch: bool = True,
    ):
        config.validate(require_dispatch=require_dispatch)
        self.config = config
        self._capability = capability
        self._settings = settings or DEFAULT_CONFIG
        self._labels = {normalize_label(m.value): m for m in config.categories}

    def match(self, raw: str) -> Optional[Enum]:
        """Return the category member for a raw label, or None."""
        return self._labels.get(normalize_label(raw))

    async def classify(self, text: str, request_id: Optional[str] = None) -> RoutingDecision:
        """
        Classify an input with exactly one classification call.

        Args:
            text: User input
            request_id: Optional identifier used in log lines

        Returns:
            RoutingDecision whose category is always a member of the set
        """
        _log = f"[request={request_id or 'unknown'}] [graph=router] [node=classify] "
        classifier = self.config.classifier
        timeout = classifier.timeout or self._settings.classification_timeout

        logger.info(f"{_log}Classifying input | chars={len(text)}, role={classifier.name}")
        result = await invoke_guarded(self._capability, classifier, text, timeout)
        default = self.config.default

        if not result.ok:
            logger.warning(
                f"{_log}Classification failed ({result.describe()}) "
                f"-> default '{default.value}'"
            )
            return RoutingDecision(
                category=default.value,
                fallback_used=True,
                classification=result,
            )

        category = self.match(result.text)
        if category is None:
            logger.warning(
                f"{_log}Unrecognized label {result.text!r} -> default '{default.value}'"
            )
            return RoutingDecision(
                category=default.value,
                raw_label=result.text,
                fallback_used=True,
                classification=AgentFailure(
                    kind=FailureKind.INVALID_RESPONSE,
                    message=f"label {result.text[:60]!r} is not one of "
                    f"{[m.value for m in self.config.categories]}",
                ),
            )

        logger.info(f"{_log}Decided category -> {category.value}")
        return RoutingDecision(
            category=category.value,
            raw_label=result.text,
            classification=result,
        )

    async def route(self, text: str, request_id: Optional[str] = None) -> Enum:
        """Classify an input and return the category member."""
        decision = await self.classify(text, request_id=request_id)
        return self.config.categories(decision.category)

    async def dispatch(
        self,
        text: str,
        category: Enum,
        request_id: Optional[str] = None,
    ) -> AgentResult:
        """
        Invoke the specialist mapped to a category once.

        Args:
            text: User input
            category: Member of the closed set
            request_id: Optional identifier used in log lines

        Returns:
            The specialist's result; failures are not recovered here
        """
        _log = f"[request={request_id or 'unknown'}] [graph=router] [node=dispatch] "
        specialist = self.config.specialist_for(category)
        timeout = specialist.timeout or self._settings.specialist_timeout

        logger.info(f"{_log}Dispatching to '{specialist.name}' | category={category.value}")
        result = await invoke_guarded(self._capability, specialist, text, timeout)
        if result.ok:
            logger.info(f"{_log}Specialist responded | chars={len(result.text)}")
        else:
            logger.warning(f"{_log}Specialist failed: {result.describe()}")
        return result

    async def handle(
        self,
        text: str,
        request_id: Optional[str] = None,
    ) -> Tuple[RoutingDecision, AgentResult]:
        """Classify an input, then dispatch it to the chosen specialist."""
        decision = await self.classify(text, request_id=request_id)
        category = self.config.categories(decision.category)
        result = await self.dispatch(text, category, request_id=request_id)
        return decision, result
