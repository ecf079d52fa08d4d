"""
Toolgate Tool System

Every tool call from the reasoning loop goes through the registry:

    Model (tool_use) -> ChatAgent -> ToolRegistry.invoke -> handler

Components:
- ToolRegistry: lookup, argument validation and dispatch
- ToolDescriptor / ArgumentField: tool declaration with a typed schema
- CodeExecutor: capability interface for running code snippets
- SandboxedExecutor: local subprocess backend
- RemoteCodeExecutor: HTTP backend talking to an executor service
- Built-in tools: Weather, Multiply, run_python_code
"""

from toolgate.tools.models import (
    TIMEOUT_MARKER,
    ArgumentField,
    ExecutionResult,
    ExecutionStatus,
    InvocationRequest,
    ToolResult,
)
from toolgate.tools.registry import ToolDescriptor, ToolRegistry
from toolgate.tools.remote import RemoteCodeExecutor
from toolgate.tools.sandbox import CodeExecutor, SandboxConfig, SandboxedExecutor

__all__ = [
    "TIMEOUT_MARKER",
    "ArgumentField",
    "CodeExecutor",
    "ExecutionResult",
    "ExecutionStatus",
    "InvocationRequest",
    "RemoteCodeExecutor",
    "SandboxConfig",
    "SandboxedExecutor",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolResult",
]
