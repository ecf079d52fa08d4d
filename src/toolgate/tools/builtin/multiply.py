"""Multiply tool: product of two numbers."""

from toolgate.tools.models import ArgumentField
from toolgate.tools.registry import ToolDescriptor


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _multiply(a: float, b: float) -> str:
    """Multiply two numbers already checked by schema validation."""
    return f"The result of multiplication is {_format_number(a * b)}"


MULTIPLY_TOOL = ToolDescriptor(
    name="Multiply",
    description="Multiplication of two numbers",
    argument_schema={
        "a": ArgumentField(type="number", description="First Number"),
        "b": ArgumentField(type="number", description="Second Number"),
    },
    handler=_multiply,
)
