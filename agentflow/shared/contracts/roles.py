"""
Agent role definitions.

An AgentRole binds a name to a fixed system instruction and optional
generation parameters. Roles are defined once at startup and shared
read-only by every request, so they are frozen dataclasses.
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from agentflow.shared.errors import ConfigurationError, UnknownRoleError


@dataclass(frozen=True)
class GenerationParams:
    """
    Generation parameters for a single call.

    Attributes:
        temperature: Sampling temperature (None keeps the provider default)
        model: Model identifier override
        max_tokens: Upper bound on generated tokens
    """

    temperature: Optional[float] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = None

    def merged_over(self, base: "GenerationParams") -> "GenerationParams":
        """Return base with every field this instance sets taken from here."""
        return GenerationParams(
            temperature=self.temperature if self.temperature is not None else base.temperature,
            model=self.model or base.model,
            max_tokens=self.max_tokens if self.max_tokens is not None else base.max_tokens,
        )


@dataclass(frozen=True)
class AgentRole:
    """
    A configured capability variant.

    Attributes:
        name: Unique role name (e.g. "technical_support")
        instruction: System instruction sent with every call
        temperature: Optional sampling temperature for this role
        model: Optional model override for this role
        timeout: Optional per-call timeout in seconds (overrides config)
    """

    name: str
    instruction: str
    temperature: Optional[float] = None
    model: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def params(self) -> GenerationParams:
        return GenerationParams(temperature=self.temperature, model=self.model)

    def with_instruction(self, instruction: str) -> "AgentRole":
        return replace(self, instruction=instruction)


@dataclass(frozen=True)
class AgentInvocation:
    """A single request to the agent capability."""

    role: AgentRole
    input: str
    timeout: float
    overrides: Optional[GenerationParams] = None

    @property
    def params(self) -> GenerationParams:
        if self.overrides is None:
            return self.role.params
        return self.overrides.merged_over(self.role.params)


class RoleRegistry:
    """
    Closed registry of agent roles, resolved at configuration time.

    Roles are registered while the application is assembled; lookups of
    names that were never registered fail immediately instead of at call
    time.
    """

    def __init__(self, roles: Iterable[AgentRole] = ()):
        self._roles: Dict[str, AgentRole] = {}
        for role in roles:
            self.register(role)

    def register(self, role: AgentRole) -> AgentRole:
        if not role.name:
            raise ConfigurationError("Agent role name must not be empty")
        if not role.instruction.strip():
            raise ConfigurationError(f"Agent role {role.name!r} has an empty instruction")
        existing = self._roles.get(role.name)
        if existing is not None and existing != role:
            raise ConfigurationError(f"Agent role {role.name!r} is already registered")
        self._roles[role.name] = role
        return role

    def get(self, name: str) -> AgentRole:
        try:
            return self._roles[name]
        except KeyError:
            raise UnknownRoleError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._roles

    def __iter__(self) -> Iterator[AgentRole]:
        return iter(self._roles.values())

    def __len__(self) -> int:
        return len(self._roles)
