"""
Toolgate Configuration

Settings are read from the environment, after loading a `.env` file from
the working directory (or its parents) when one exists.

Environment variables:
    ANTHROPIC_API_KEY         read directly by the Anthropic SDK
    TOOLGATE_MODEL            model used by the chat agent
    EXECUTOR_URL              remote executor endpoint; unset -> local sandbox
    CODE_EXECUTION_ENABLED    "false" removes the code tool entirely
    SANDBOX_TIMEOUT_SECONDS   per-snippet deadline
    SANDBOX_MAX_OUTPUT_BYTES  cap on each captured stream
    LOG_LEVEL / LOG_JSON      logging setup
    HOST / PORT               API bind address
"""

from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from toolgate.tools.remote import RemoteCodeExecutor
from toolgate.tools.sandbox import CodeExecutor, SandboxConfig, SandboxedExecutor

DEFAULT_MODEL = "claude-sonnet-4-20250514"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


class Settings(BaseModel):
    """Runtime configuration for the API server, the agent and the executors."""

    model: str = DEFAULT_MODEL
    executor_url: str | None = None
    code_execution_enabled: bool = True
    sandbox_timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)
    sandbox_max_output_bytes: int = Field(default=65536, ge=1024, le=1048576)
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables (and `.env` if present)."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        values: dict = {}
        env_map = {
            "TOOLGATE_MODEL": "model",
            "SANDBOX_TIMEOUT_SECONDS": "sandbox_timeout_seconds",
            "SANDBOX_MAX_OUTPUT_BYTES": "sandbox_max_output_bytes",
            "LOG_LEVEL": "log_level",
            "HOST": "host",
            "PORT": "port",
        }
        for var, key in env_map.items():
            value = os.environ.get(var)
            if value:
                values[key] = value

        values["executor_url"] = os.environ.get("EXECUTOR_URL") or None
        values["code_execution_enabled"] = _env_flag("CODE_EXECUTION_ENABLED", True)
        values["log_json"] = _env_flag("LOG_JSON", False)
        return cls(**values)

    @property
    def executor_backend(self) -> str:
        if not self.code_execution_enabled:
            return "none"
        return "remote" if self.executor_url else "local"

    def sandbox_config(self) -> SandboxConfig:
        return SandboxConfig(
            timeout_seconds=self.sandbox_timeout_seconds,
            max_output_bytes=self.sandbox_max_output_bytes,
        )


def create_executor(settings: Settings) -> CodeExecutor | None:
    """Pick the code execution backend the settings ask for.

    Returns None when code execution is disabled.
    """
    backend = settings.executor_backend
    if backend == "none":
        return None
    if backend == "remote":
        return RemoteCodeExecutor(settings.executor_url, timeout_seconds=settings.sandbox_timeout_seconds)
    return SandboxedExecutor(settings.sandbox_config())
