"""
Toolgate API Server

FastAPI backend for the chat front-end. `POST /generate` forwards the
prompt to the chat agent, which runs tool calls through the registry.
The registry and executors are never exposed directly on that route.

Usage:
    uvicorn toolgate.api.server:app --port 3001
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from toolgate import __version__
from toolgate.agent import ChatAgent
from toolgate.config import Settings, create_executor
from toolgate.logging import configure_logging, get_logger
from toolgate.tools.builtin import build_registry
from toolgate.tools.registry import ToolRegistry
from toolgate.tools.sandbox import CodeExecutor

logger = get_logger("toolgate.api")

GENERIC_ERROR = "Something went wrong while generating the response."


# ─── Request/Response Models ────────────────────────────────

class GenerateRequest(BaseModel):
    prompt: str
    thread_id: int = 1


class StatusResponse(BaseModel):
    version: str = __version__
    tools: list[str] = Field(default_factory=list)
    executor_backend: str = "none"


# ─── Gateway ────────────────────────────────────────────────

class Gateway:
    """Holds the registry, the code executor and the chat agent for the app."""

    def __init__(
        self,
        settings: Settings,
        registry: ToolRegistry | None = None,
        executor: CodeExecutor | None = None,
        agent: ChatAgent | None = None,
    ):
        self.settings = settings
        if registry is None:
            executor = executor or create_executor(settings)
            registry = build_registry(executor)
        self.executor = executor
        self.registry = registry
        self._agent = agent

    @property
    def agent(self) -> ChatAgent:
        if self._agent is None:
            self._agent = ChatAgent(self.registry, model=self.settings.model)
        return self._agent

    @property
    def executor_backend(self) -> str:
        return self.executor.backend if self.executor is not None else "none"

    async def aclose(self) -> None:
        if self.executor is not None:
            await self.executor.aclose()


# ─── App ────────────────────────────────────────────────────

@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    await app.state.gateway.aclose()


def create_app(gateway: Gateway | None = None) -> FastAPI:
    """Build the API app. Without a gateway, one is configured from the environment."""
    if gateway is None:
        settings = Settings.from_env()
        configure_logging(level=settings.log_level, json_output=settings.log_json)
        gateway = Gateway(settings)

    app = FastAPI(title="Toolgate", version=__version__, lifespan=_lifespan)
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/generate")
    async def generate(request: GenerateRequest):
        try:
            content = await gateway.agent.generate(request.prompt, thread_id=request.thread_id)
        except Exception:
            logger.exception("Generation failed", extra={"thread_id": request.thread_id})
            return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})
        return JSONResponse(content=content)

    @app.get("/api/tools")
    async def list_tools():
        return {"tools": gateway.registry.get_schemas()}

    @app.get("/api/status", response_model=StatusResponse)
    async def status():
        return StatusResponse(
            tools=gateway.registry.tool_names,
            executor_backend=gateway.executor_backend,
        )

    return app


app = create_app()
