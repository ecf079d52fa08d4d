"""
Toolgate Chat Agent

Bridges a chat prompt to the hosted model. The model does the reasoning
and picks tools; this module only hands it the registry schemas, runs
each requested tool through ToolRegistry.invoke(), and feeds the results
back until the model produces a final answer.

Registry failures (unknown tool, bad arguments, handler errors) are
returned to the model as error tool results so it can react; they never
abort the chat request.
"""

from __future__ import annotations

import json
from typing import Any

import anthropic
from pydantic import BaseModel

from toolgate.config import DEFAULT_MODEL
from toolgate.exceptions import ToolgateError
from toolgate.logging import get_logger
from toolgate.tools.models import InvocationRequest, ToolResult
from toolgate.tools.registry import ToolRegistry

logger = get_logger("toolgate.agent")

SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Use the available tools when they help "
    "answer the user's question. When you run code, print the values you need "
    "to see; only stdout and stderr are returned to you."
)

MAX_TOOL_ROUNDS = 10  # Max tool_use round-trips per prompt

ROUND_LIMIT_MESSAGE = (
    "I could not finish answering: the request needed more tool calls than "
    "allowed. Please try a simpler or more specific question."
)


def render_tool_output(value: Any) -> str:
    """Turn a handler result into the text content of a tool_result block."""
    if isinstance(value, str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return json.dumps(value, default=str)


class ChatAgent:
    """Answers a prompt with the hosted model, executing its tool calls."""

    def __init__(
        self,
        registry: ToolRegistry,
        client: anthropic.AsyncAnthropic | None = None,
        model: str = DEFAULT_MODEL,
        system_prompt: str = SYSTEM_PROMPT,
        max_tokens: int = 4096,
    ):
        self.registry = registry
        self.model = model
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self._client = client or anthropic.AsyncAnthropic()

    async def run_tool(self, name: str, tool_input: dict, tool_use_id: str = "") -> ToolResult:
        """Invoke one tool and package the outcome for the model."""
        request = InvocationRequest(
            tool_name=name,
            raw_arguments=tool_input or {},
            tool_use_id=tool_use_id,
        )
        try:
            output = await self.registry.invoke(request)
        except ToolgateError as e:
            return ToolResult(tool_use_id=tool_use_id, content=f"Error: {e}", is_error=True)
        return ToolResult(tool_use_id=tool_use_id, content=render_tool_output(output))

    async def generate(self, prompt: str, thread_id: int | None = None) -> str:
        """Return the model's final text for `prompt`.

        `thread_id` only correlates log lines; conversation memory is not
        kept here.
        """
        log_extra = {"thread_id": thread_id}
        logger.info("Generating response", extra=log_extra)

        messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]
        api_kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": self.system_prompt,
            "messages": messages,
        }
        if len(self.registry) > 0:
            api_kwargs["tools"] = self.registry.get_schemas()

        response = await self._client.messages.create(**api_kwargs)

        rounds = 0
        while response.stop_reason == "tool_use" and rounds < MAX_TOOL_ROUNDS:
            rounds += 1

            tool_results = []
            for block in response.content:
                if block.type != "tool_use":
                    continue
                result = await self.run_tool(block.name, block.input, block.id)
                tool_results.append(result)
                logger.info(
                    f"Tool call round {rounds}: {block.name}",
                    extra={**log_extra, "tool_name": block.name, "status": "error" if result.is_error else "ok"},
                )

            messages.append({"role": "assistant", "content": response.content})
            messages.append({
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": tr.tool_use_id,
                        "content": tr.content,
                        "is_error": tr.is_error,
                    }
                    for tr in tool_results
                ],
            })

            api_kwargs["messages"] = messages
            response = await self._client.messages.create(**api_kwargs)

        result = ""
        for block in response.content:
            if getattr(block, "type", "") == "text":
                result += block.text

        if response.stop_reason == "tool_use":
            logger.warning(f"Stopped after {MAX_TOOL_ROUNDS} tool rounds", extra=log_extra)
            return result or ROUND_LIMIT_MESSAGE
        return result
