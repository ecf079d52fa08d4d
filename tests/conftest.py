"""Shared test fixtures for the Toolgate test suite."""

import pytest

from toolgate.tools.models import ArgumentField
from toolgate.tools.registry import ToolDescriptor, ToolRegistry
from toolgate.tools.sandbox import SandboxConfig, SandboxedExecutor


@pytest.fixture
def echo_tool():
    return ToolDescriptor(
        name="echo",
        description="Echo the text back",
        argument_schema={"text": ArgumentField(type="string", description="Text to echo")},
        handler=lambda text: text,
    )


@pytest.fixture
def registry(echo_tool):
    reg = ToolRegistry()
    reg.register(echo_tool)
    return reg


@pytest.fixture
def sandbox():
    return SandboxedExecutor(SandboxConfig(timeout_seconds=10.0, max_concurrent=2))


@pytest.fixture
def fast_sandbox():
    """Sandbox with a short deadline for timeout tests."""
    return SandboxedExecutor(SandboxConfig(timeout_seconds=1.0))
