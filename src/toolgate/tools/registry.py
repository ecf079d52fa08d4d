"""
Toolgate Tool Registry

Central registry for all tools available to the reasoning loop. Each
tool is registered with a typed argument schema; invoke() looks the
tool up, validates the raw arguments, and dispatches to the handler.

Lookup and validation failures are raised to the caller of invoke().
Anything raised by a handler is wrapped in HandlerError so a failing
tool never takes the registry down with it.
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from toolgate.exceptions import (
    DuplicateToolError,
    HandlerError,
    UnknownToolError,
    ValidationError,
)
from toolgate.logging import get_logger
from toolgate.tools.models import ArgumentField, InvocationRequest

logger = get_logger("toolgate.tools.registry")

# JSON-schema type -> accepted Python types
_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
    "array": (list, tuple),
    "object": dict,
}


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _matches(value: Any, expected: str) -> bool:
    # bool is an int subclass; never let True pass as a number
    if isinstance(value, bool) and expected != "boolean":
        return False
    return isinstance(value, _TYPE_MAP[expected])


class ToolDescriptor:
    """A callable tool with a name, a description and a typed argument schema.

    The handler may be a plain function or a coroutine function; it
    receives the validated arguments as keywords.
    """

    def __init__(
        self,
        name: str,
        description: str,
        argument_schema: Mapping[str, ArgumentField] | None = None,
        handler: Callable[..., Any] | Callable[..., Awaitable[Any]] | None = None,
    ):
        if handler is None:
            raise TypeError(f"Tool '{name}' needs a handler")
        self.name = name
        self.description = description
        self.argument_schema: dict[str, ArgumentField] = dict(argument_schema or {})
        self.handler = handler

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON-schema object describing the arguments."""
        return {
            "type": "object",
            "properties": {
                name: field.to_json_schema() for name, field in self.argument_schema.items()
            },
            "required": [name for name, field in self.argument_schema.items() if field.required],
        }

    def to_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def validate(self, raw_arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Check raw arguments against the schema and return the typed kwargs.

        Keys not declared in the schema are dropped. Raises ValidationError
        on the first missing or mistyped field.
        """
        validated: dict[str, Any] = {}
        for name, field in self.argument_schema.items():
            if name not in raw_arguments:
                if field.required:
                    raise ValidationError(self.name, name, field.type, "missing")
                if field.default is not None:
                    validated[name] = field.default
                continue

            value = raw_arguments[name]
            if not _matches(value, field.type):
                raise ValidationError(self.name, name, field.type, _type_name(value))
            validated[name] = list(value) if isinstance(value, tuple) else value
        return validated


class ToolRegistry:
    """Central registry for all available tools.

    Tools are registered once at startup. The registry keeps no
    per-invocation state, so independent invocations can run
    concurrently.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool.

        Raises DuplicateToolError if a tool with the same name already
        exists; the registry is left untouched in that case.
        """
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = descriptor
        logger.debug("Registered tool", extra={"tool_name": descriptor.name})

    def get(self, name: str) -> ToolDescriptor | None:
        """Look up a registered tool by name."""
        return self._tools.get(name)

    def get_all(self) -> list[ToolDescriptor]:
        """Return all registered tools."""
        return list(self._tools.values())

    def get_schemas(self) -> list[dict]:
        """Tool schemas in the shape the Messages API expects for `tools`."""
        return [t.to_schema() for t in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools.keys())

    async def invoke(self, request: InvocationRequest) -> Any:
        """Look up, validate and run a tool.

        Flow:
        1. Registry lookup -> UnknownToolError
        2. Schema validation -> ValidationError
        3. Handler call (sync or async)
        4. Handler failure -> HandlerError chained to the original
        5. Handler result returned verbatim
        """
        tool = self._tools.get(request.tool_name)
        if tool is None:
            logger.warning(
                "Invocation of unknown tool",
                extra={"tool_name": request.tool_name, "request_id": request.id},
            )
            raise UnknownToolError(request.tool_name)

        arguments = tool.validate(request.raw_arguments)

        start = time.monotonic()
        try:
            result = tool.handler(**arguments)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.warning(
                f"Tool handler failed: {type(e).__name__}: {e}",
                extra={
                    "tool_name": tool.name,
                    "request_id": request.id,
                    "status": "error",
                    "duration_ms": duration_ms,
                },
            )
            raise HandlerError(
                tool.name,
                str(e) or type(e).__name__,
                details={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Tool invoked",
            extra={
                "tool_name": tool.name,
                "request_id": request.id,
                "status": "ok",
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            },
        )
        return result

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
