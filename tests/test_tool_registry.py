"""Tests for the Toolgate Tool Registry.

Covers registration, lookup, argument validation, dispatch and
handler failure wrapping.
"""

import asyncio

import pytest

from toolgate.exceptions import (
    DuplicateToolError,
    HandlerError,
    UnknownToolError,
    ValidationError,
)
from toolgate.tools.models import ArgumentField, InvocationRequest
from toolgate.tools.registry import ToolDescriptor, ToolRegistry


def _make_tool(name: str, /, handler=None, **fields: ArgumentField) -> ToolDescriptor:
    """Helper to create test tools."""
    return ToolDescriptor(
        name=name,
        description=f"Test tool: {name}",
        argument_schema=fields,
        handler=handler or (lambda **kwargs: f"result from {name}"),
    )


class TestToolRegistration:
    """Tests for registering and looking up tools."""

    def test_register_tool(self):
        registry = ToolRegistry()
        registry.register(_make_tool("test_tool"))
        assert "test_tool" in registry
        assert len(registry) == 1

    def test_register_duplicate_raises(self):
        registry = ToolRegistry()
        registry.register(_make_tool("test_tool"))
        with pytest.raises(DuplicateToolError, match="already registered"):
            registry.register(_make_tool("test_tool"))

    def test_failed_duplicate_leaves_registry_unchanged(self):
        registry = ToolRegistry()
        first = _make_tool("test_tool")
        registry.register(first)
        registry.register(_make_tool("other"))
        before = registry.get_schemas()

        with pytest.raises(DuplicateToolError):
            registry.register(_make_tool("test_tool", handler=lambda: "replacement"))

        assert registry.get_schemas() == before
        assert registry.get("test_tool") is first
        assert len(registry) == 2

    def test_get_nonexistent_tool(self):
        registry = ToolRegistry()
        assert registry.get("nonexistent") is None

    def test_get_all_tools(self):
        registry = ToolRegistry()
        for name in ("a", "b", "c"):
            registry.register(_make_tool(name))
        assert {t.name for t in registry.get_all()} == {"a", "b", "c"}
        assert registry.tool_names == ["a", "b", "c"]

    def test_handler_is_required(self):
        with pytest.raises(TypeError):
            ToolDescriptor(name="broken", description="no handler")


class TestSchemaGeneration:
    """Tests for the schemas handed to the model."""

    def test_input_schema_shape(self):
        tool = _make_tool(
            "mul",
            a=ArgumentField(type="number", description="First Number"),
            b=ArgumentField(type="number", description="Second Number"),
            note=ArgumentField(type="string", required=False, default="none"),
        )
        schema = tool.input_schema
        assert schema["type"] == "object"
        assert schema["properties"]["a"] == {"type": "number", "description": "First Number"}
        assert schema["properties"]["note"]["default"] == "none"
        assert schema["required"] == ["a", "b"]

    def test_get_schemas_all(self):
        registry = ToolRegistry()
        registry.register(_make_tool("a"))
        registry.register(_make_tool("b"))
        schemas = registry.get_schemas()
        assert len(schemas) == 2
        assert all({"name", "description", "input_schema"} <= set(s) for s in schemas)


class TestInvokeLookup:
    async def test_unknown_tool(self, registry):
        with pytest.raises(UnknownToolError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="nope"))
        assert exc_info.value.tool_name == "nope"

    async def test_unknown_tool_on_empty_registry(self):
        with pytest.raises(UnknownToolError):
            await ToolRegistry().invoke(InvocationRequest(tool_name="Multiply", raw_arguments={"a": 1, "b": 2}))

    async def test_dispatch(self, registry):
        result = await registry.invoke(InvocationRequest(tool_name="echo", raw_arguments={"text": "hi"}))
        assert result == "hi"


class TestInvokeValidation:
    async def test_missing_required_field(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="echo", raw_arguments={}))
        err = exc_info.value
        assert err.field == "text"
        assert err.expected == "string"
        assert err.actual == "missing"
        assert "text" in str(err)

    async def test_wrong_type(self, registry):
        with pytest.raises(ValidationError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="echo", raw_arguments={"text": 42}))
        err = exc_info.value
        assert err.field == "text"
        assert err.expected == "string"
        assert err.actual == "integer"

    async def test_boolean_is_not_a_number(self):
        registry = ToolRegistry()
        registry.register(_make_tool("num", n=ArgumentField(type="number")))
        with pytest.raises(ValidationError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="num", raw_arguments={"n": True}))
        assert exc_info.value.actual == "boolean"

    async def test_string_is_not_coerced_to_number(self):
        registry = ToolRegistry()
        registry.register(_make_tool("num", n=ArgumentField(type="number")))
        with pytest.raises(ValidationError):
            await registry.invoke(InvocationRequest(tool_name="num", raw_arguments={"n": "3"}))

    async def test_integer_rejects_float(self):
        registry = ToolRegistry()
        registry.register(_make_tool("count", n=ArgumentField(type="integer")))
        with pytest.raises(ValidationError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="count", raw_arguments={"n": 1.5}))
        assert exc_info.value.actual == "number"

    async def test_handler_not_called_on_invalid_input(self):
        calls = []
        registry = ToolRegistry()
        registry.register(_make_tool("t", handler=lambda x: calls.append(x), x=ArgumentField(type="string")))
        with pytest.raises(ValidationError):
            await registry.invoke(InvocationRequest(tool_name="t", raw_arguments={"x": None}))
        assert calls == []

    async def test_extra_fields_are_dropped(self):
        seen = {}

        def handler(**kwargs):
            seen.update(kwargs)
            return "ok"

        registry = ToolRegistry()
        registry.register(_make_tool("t", handler=handler, x=ArgumentField(type="string")))
        await registry.invoke(InvocationRequest(tool_name="t", raw_arguments={"x": "a", "y": "b"}))
        assert seen == {"x": "a"}

    async def test_optional_field_default(self):
        registry = ToolRegistry()
        registry.register(
            _make_tool(
                "greet",
                handler=lambda name, greeting: f"{greeting}, {name}",
                name=ArgumentField(type="string"),
                greeting=ArgumentField(type="string", required=False, default="Hello"),
            )
        )
        result = await registry.invoke(InvocationRequest(tool_name="greet", raw_arguments={"name": "Ada"}))
        assert result == "Hello, Ada"

    async def test_array_and_object_fields(self):
        registry = ToolRegistry()
        registry.register(
            _make_tool(
                "shape",
                handler=lambda items, meta: (items, meta),
                items=ArgumentField(type="array"),
                meta=ArgumentField(type="object"),
            )
        )
        items, meta = await registry.invoke(
            InvocationRequest(tool_name="shape", raw_arguments={"items": [1, 2], "meta": {"k": "v"}})
        )
        assert items == [1, 2]
        assert meta == {"k": "v"}


class TestInvokeHandlers:
    async def test_result_returned_verbatim(self):
        payload = {"rows": [1, 2, 3]}
        registry = ToolRegistry()
        registry.register(_make_tool("data", handler=lambda: payload))
        result = await registry.invoke(InvocationRequest(tool_name="data"))
        assert result is payload

    async def test_async_handler(self):
        async def handler(text: str) -> str:
            await asyncio.sleep(0)
            return text.upper()

        registry = ToolRegistry()
        registry.register(_make_tool("upper", handler=handler, text=ArgumentField(type="string")))
        result = await registry.invoke(InvocationRequest(tool_name="upper", raw_arguments={"text": "abc"}))
        assert result == "ABC"

    async def test_sync_handler_error_wrapped(self):
        def handler():
            raise ValueError("boom")

        registry = ToolRegistry()
        registry.register(_make_tool("fail", handler=handler))
        with pytest.raises(HandlerError) as exc_info:
            await registry.invoke(InvocationRequest(tool_name="fail"))
        err = exc_info.value
        assert err.tool_name == "fail"
        assert err.original_message == "boom"
        assert isinstance(err.__cause__, ValueError)
        assert err.details["error_type"] == "ValueError"

    async def test_async_handler_error_wrapped(self):
        async def handler():
            raise ConnectionError("network down")

        registry = ToolRegistry()
        registry.register(_make_tool("net", handler=handler))
        with pytest.raises(HandlerError, match="network down"):
            await registry.invoke(InvocationRequest(tool_name="net"))

    async def test_registry_usable_after_handler_failure(self, registry):
        def handler():
            raise RuntimeError("crash")

        registry.register(_make_tool("fail", handler=handler))
        with pytest.raises(HandlerError):
            await registry.invoke(InvocationRequest(tool_name="fail"))
        result = await registry.invoke(InvocationRequest(tool_name="echo", raw_arguments={"text": "still here"}))
        assert result == "still here"

    async def test_concurrent_invocations(self):
        async def handler(n: int) -> int:
            await asyncio.sleep(0.01)
            return n * 2

        registry = ToolRegistry()
        registry.register(_make_tool("double", handler=handler, n=ArgumentField(type="integer")))
        results = await asyncio.gather(
            *(registry.invoke(InvocationRequest(tool_name="double", raw_arguments={"n": i})) for i in range(5))
        )
        assert results == [0, 2, 4, 6, 8]
