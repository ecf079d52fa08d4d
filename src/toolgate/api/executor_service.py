"""
Toolgate Executor Service

The other end of the remote executor protocol: accepts `{"code": ...}`
and answers `{"stdout": ..., "stderr": ...}` after running the snippet
in the local sandbox. Meant to be deployed in its own container so that
EXECUTOR_URL points the API server at an isolated host.

Usage:
    uvicorn toolgate.api.executor_service:app --port 8080
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from toolgate import __version__
from toolgate.config import Settings
from toolgate.exceptions import ExecutionFailedError
from toolgate.logging import get_logger
from toolgate.tools.sandbox import SandboxedExecutor

logger = get_logger("toolgate.api.executor")


class ExecuteRequest(BaseModel):
    code: str


class ExecuteResponse(BaseModel):
    stdout: str = ""
    stderr: str = ""


def create_executor_app(executor: SandboxedExecutor | None = None) -> FastAPI:
    """Build the executor service around a local sandbox."""
    if executor is None:
        executor = SandboxedExecutor(Settings.from_env().sandbox_config())

    app = FastAPI(title="Toolgate Executor", version=__version__)
    app.state.executor = executor

    async def _execute(request: ExecuteRequest):
        try:
            result = await executor.execute(request.code)
        except ExecutionFailedError as e:
            logger.error(f"Execution harness failed: {e}", extra={"backend": executor.backend})
            return JSONResponse(status_code=500, content={"error": "Execution harness failed"})
        return ExecuteResponse(**result.to_wire())

    app.add_api_route("/execute", _execute, methods=["POST"], response_model=ExecuteResponse)
    app.add_api_route("/", _execute, methods=["POST"], response_model=ExecuteResponse)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "timeout_seconds": executor.config.timeout_seconds,
        }

    return app


app = create_executor_app()
