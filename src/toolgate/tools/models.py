"""
Toolgate Tool System Models

Pydantic models shared by the registry, the code executors and the
agent bridge. Tool arguments are declared per field and rendered as a
JSON-schema object for the model; code execution produces an immutable
ExecutionResult.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ArgumentType = Literal["string", "number", "integer", "boolean", "array", "object"]

TIMEOUT_MARKER = "[TIMEOUT]"


class ArgumentField(BaseModel):
    """A single named argument in a tool's schema."""

    type: ArgumentType
    description: str = ""
    required: bool = True
    default: Any = None

    def to_json_schema(self) -> dict[str, Any]:
        prop: dict[str, Any] = {"type": self.type, "description": self.description}
        if not self.required and self.default is not None:
            prop["default"] = self.default
        return prop


class InvocationRequest(BaseModel):
    """A single tool call handed to the registry by the reasoning loop.

    Created per tool_use block and consumed once by ToolRegistry.invoke().
    """

    id: str = Field(default_factory=lambda: f"inv-{uuid.uuid4().hex[:8]}")
    tool_name: str
    raw_arguments: dict[str, Any] = Field(default_factory=dict)
    tool_use_id: str = ""


class ExecutionStatus(str, Enum):
    """Lifecycle of a single code execution."""

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    TIMED_OUT = "TIMED_OUT"
    FAILED = "FAILED"


class ExecutionResult(BaseModel):
    """Captured output of one code execution.

    An error raised by the snippet still yields COMPLETED, with the
    error text in stderr. Only TIMED_OUT results carry TIMEOUT_MARKER.
    """

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    status: ExecutionStatus = ExecutionStatus.COMPLETED
    exit_code: int | None = None
    duration_ms: float = 0.0

    @property
    def timed_out(self) -> bool:
        return self.status == ExecutionStatus.TIMED_OUT

    def to_wire(self) -> dict[str, str]:
        """Body of the remote executor protocol response."""
        return {"stdout": self.stdout, "stderr": self.stderr}


class ToolResult(BaseModel):
    """Result of a tool call as fed back to the model."""

    tool_use_id: str
    content: str
    is_error: bool = False
