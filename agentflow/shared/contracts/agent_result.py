"""
Agent result contract.

Defines the tagged union every agent call produces: either a success
carrying generated text, or a failure carrying a failure kind. Results are
frozen once built and are never partially filled.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class FailureKind(str, Enum):
    """Why an agent call did not produce usable text."""

    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    INVALID_RESPONSE = "invalid_response"
    CANCELLED = "cancelled"


# Higher is worse. Used to pick the representative failure of a failed batch.
FAILURE_SEVERITY = {
    FailureKind.CANCELLED: 0,
    FailureKind.TIMEOUT: 1,
    FailureKind.PROVIDER_ERROR: 2,
    FailureKind.INVALID_RESPONSE: 3,
}


class AgentSuccess(BaseModel):
    """A completed agent call."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    text: str = Field(description="Generated text")
    latency_ms: float = Field(default=0.0, ge=0, description="Wall-clock call duration")

    @property
    def ok(self) -> bool:
        return True


class AgentFailure(BaseModel):
    """A failed agent call."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    kind: FailureKind = Field(description="Failure category")
    message: str = Field(default="", description="Human-readable detail")

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Short `kind: message` form used in logs and notes."""
        if self.message:
            return f"{self.kind.value}: {self.message}"
        return self.kind.value


AgentResult = Annotated[
    Union[AgentSuccess, AgentFailure],
    Field(discriminator="status"),
]

AGENT_RESULT_ADAPTER = TypeAdapter(AgentResult)


def failure_placeholder(failure: AgentFailure) -> str:
    """Standard text carried forward in place of a failed step's output."""
    return f"step failed: {failure.kind.value}"
