"""
Toolgate Built-in Tools

The tools the chat agent is wired with: a canned weather lookup,
multiplication, and, when a code executor is configured, Python
code execution.
"""

from __future__ import annotations

from toolgate.tools.builtin.code_exec import CODE_EXEC_TOOL_NAME, make_code_exec_tool
from toolgate.tools.builtin.multiply import MULTIPLY_TOOL
from toolgate.tools.builtin.weather import WEATHER_TOOL
from toolgate.tools.registry import ToolRegistry
from toolgate.tools.sandbox import CodeExecutor

ALL_BUILTIN_TOOLS = [
    WEATHER_TOOL,
    MULTIPLY_TOOL,
]

__all__ = [
    "ALL_BUILTIN_TOOLS",
    "CODE_EXEC_TOOL_NAME",
    "MULTIPLY_TOOL",
    "WEATHER_TOOL",
    "build_registry",
    "make_code_exec_tool",
    "register_all_builtins",
]


def register_all_builtins(registry: ToolRegistry, executor: CodeExecutor | None = None) -> None:
    """Register the built-in tools; the code tool only when an executor is given."""
    for tool in ALL_BUILTIN_TOOLS:
        registry.register(tool)
    if executor is not None:
        registry.register(make_code_exec_tool(executor))


def build_registry(executor: CodeExecutor | None = None) -> ToolRegistry:
    """Create a registry holding the built-in tools."""
    registry = ToolRegistry()
    register_all_builtins(registry, executor)
    return registry
