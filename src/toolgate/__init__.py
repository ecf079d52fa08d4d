"""
Toolgate: tool-invocation gateway with sandboxed code execution

Usage:
    from toolgate import InvocationRequest, build_registry, SandboxedExecutor

    registry = build_registry(SandboxedExecutor())
    result = await registry.invoke(
        InvocationRequest(tool_name="Multiply", raw_arguments={"a": 3, "b": 4})
    )

    # Code execution goes through the same registry:
    output = await registry.invoke(
        InvocationRequest(tool_name="run_python_code", raw_arguments={"code": "print('x')"})
    )
    print(output.stdout)
"""

from toolgate.exceptions import (
    DuplicateToolError,
    ExecutionFailedError,
    ExecutorUnavailableError,
    HandlerError,
    ToolgateError,
    UnknownToolError,
    ValidationError,
)
from toolgate.tools import (
    TIMEOUT_MARKER,
    ArgumentField,
    CodeExecutor,
    ExecutionResult,
    ExecutionStatus,
    InvocationRequest,
    RemoteCodeExecutor,
    SandboxConfig,
    SandboxedExecutor,
    ToolDescriptor,
    ToolRegistry,
    ToolResult,
)
from toolgate.tools.builtin import build_registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Registry
    "ArgumentField",
    "InvocationRequest",
    "ToolDescriptor",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
    # Code execution
    "TIMEOUT_MARKER",
    "CodeExecutor",
    "ExecutionResult",
    "ExecutionStatus",
    "RemoteCodeExecutor",
    "SandboxConfig",
    "SandboxedExecutor",
    # Errors
    "DuplicateToolError",
    "ExecutionFailedError",
    "ExecutorUnavailableError",
    "HandlerError",
    "ToolgateError",
    "UnknownToolError",
    "ValidationError",
]
