"""
Toolgate Custom Exceptions

Structured exception hierarchy for the tool gateway.
All Toolgate-specific exceptions inherit from ToolgateError.

Exception hierarchy:
    ToolgateError
    +-- DuplicateToolError         (name already registered)
    +-- UnknownToolError           (lookup miss on invoke)
    +-- ValidationError            (argument payload does not match the schema)
    +-- HandlerError               (anything raised inside a tool handler)
    +-- ExecutorUnavailableError   (remote executor unreachable or misbehaving)
    +-- ExecutionFailedError       (the local sandbox harness itself failed)

A snippet that times out is not an exception: the executor appends
TIMEOUT_MARKER to stderr and returns the partial result.
"""

from __future__ import annotations


class ToolgateError(Exception):
    """Base exception for all Toolgate errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class DuplicateToolError(ToolgateError):
    """Raised when a tool name is registered twice."""

    def __init__(self, tool_name: str):
        super().__init__(
            f"Tool '{tool_name}' is already registered",
            details={"tool_name": tool_name},
        )
        self.tool_name = tool_name


class UnknownToolError(ToolgateError):
    """Raised when invoking a tool name the registry does not hold."""

    def __init__(self, tool_name: str):
        super().__init__(
            f"Unknown tool: {tool_name}",
            details={"tool_name": tool_name},
        )
        self.tool_name = tool_name


class ValidationError(ToolgateError):
    """Raised when raw arguments do not satisfy a tool's argument schema.

    Identifies the offending field together with the expected and the
    actual type. A missing required field reports actual="missing".
    """

    def __init__(self, tool_name: str, field: str, expected: str, actual: str):
        if actual == "missing":
            message = f"Invalid arguments for tool '{tool_name}': missing required field '{field}' ({expected})"
        else:
            message = (
                f"Invalid arguments for tool '{tool_name}': field '{field}' "
                f"should be {expected}, got {actual}"
            )
        super().__init__(
            message,
            details={"tool_name": tool_name, "field": field, "expected": expected, "actual": actual},
        )
        self.tool_name = tool_name
        self.field = field
        self.expected = expected
        self.actual = actual


class HandlerError(ToolgateError):
    """Raised when a tool handler fails.

    The underlying exception is chained as __cause__ and its message
    is kept in `original_message`.
    """

    def __init__(self, tool_name: str, message: str, details: dict | None = None):
        super().__init__(
            f"Tool '{tool_name}' execution failed: {message}",
            details={"tool_name": tool_name, **(details or {})},
        )
        self.tool_name = tool_name
        self.original_message = message


class ExecutorUnavailableError(ToolgateError):
    """Raised when the remote code executor cannot serve a request."""

    def __init__(self, url: str, message: str, details: dict | None = None):
        super().__init__(
            f"Executor at '{url}' unavailable: {message}",
            details={"url": url, **(details or {})},
        )
        self.url = url


class ExecutionFailedError(ToolgateError):
    """Raised when the local sandbox harness crashes.

    Distinct from an error raised by the executed snippet, which is
    captured into stderr.
    """

    pass
