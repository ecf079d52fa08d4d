"""Code execution tool: runs Python through the configured CodeExecutor.

The tool is built per executor so the same declaration serves both the
local sandbox and the remote executor service.
"""

from __future__ import annotations

from toolgate.tools.models import ArgumentField, ExecutionResult
from toolgate.tools.registry import ToolDescriptor
from toolgate.tools.sandbox import CodeExecutor

CODE_EXEC_TOOL_NAME = "run_python_code"

CODE_EXEC_DESCRIPTION = (
    "Run general purpose Python code. "
    "Use this for any computation you need, including data processing, "
    "calculations and text manipulation. Print whatever you want to see: "
    "the output is composed of the stdout and stderr of the run. "
    "Each call starts a fresh interpreter; nothing persists between calls."
)


def make_code_exec_tool(executor: CodeExecutor) -> ToolDescriptor:
    """Declare the code execution tool bound to `executor`."""

    async def _execute_code(code: str) -> ExecutionResult:
        return await executor.execute(code)

    return ToolDescriptor(
        name=CODE_EXEC_TOOL_NAME,
        description=CODE_EXEC_DESCRIPTION,
        argument_schema={
            "code": ArgumentField(type="string", description="code to be executed"),
        },
        handler=_execute_code,
    )
