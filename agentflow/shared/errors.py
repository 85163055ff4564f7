"""
Exceptions raised by the orchestration engine.

Agent call failures are never raised; they travel as AgentFailure values.
These exceptions cover programmer and configuration mistakes, detected
when a component is built or before any agent is invoked.
"""


class AgentflowError(Exception):
    """Base class for engine errors."""

    pass


class ConfigurationError(AgentflowError):
    """Raised when a router, batch, pipeline or capstone is misconfigured."""

    pass


class DuplicateTaskKeyError(ConfigurationError):
    """Raised when two tasks in one fan-out batch share a key."""

    def __init__(self, key: str):
        super().__init__(f"Duplicate parallel task key: {key!r}")
        self.key = key


class UnknownRoleError(ConfigurationError):
    """Raised when a role name is not present in the role registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown agent role: {name!r}")
        self.name = name
