"""
Remote code executor.

Proxies the CodeExecutor contract over HTTP to an isolated execution
service (see toolgate.api.executor_service):

    POST <executor_url>   {"code": "..."}
    200 OK                {"stdout": "...", "stderr": "..."}

There are no retries. An unreachable service, a non-2xx answer or a
body that is not the expected JSON raises ExecutorUnavailableError,
which the registry hands back to the caller as a HandlerError. A read
timeout after the service accepted the snippet is reported the same
way a local timeout is: a TIMED_OUT result with the timeout marker.

The HTTP read timeout is the sandbox deadline plus a margin, so the
service normally answers first and its partial output comes back with
the marker already in stderr.
"""

from __future__ import annotations

import time

import httpx

from toolgate.exceptions import ExecutorUnavailableError
from toolgate.logging import get_logger
from toolgate.tools.models import TIMEOUT_MARKER, ExecutionResult, ExecutionStatus
from toolgate.tools.sandbox import CodeExecutor, timeout_message

logger = get_logger("toolgate.tools.remote")

# Extra time the service gets to answer after its own deadline
REMOTE_TIMEOUT_MARGIN_SECONDS = 5.0


class RemoteCodeExecutor(CodeExecutor):
    """Runs snippets on a remote executor service."""

    backend = "remote"

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                timeout_seconds + REMOTE_TIMEOUT_MARGIN_SECONDS,
                connect=min(timeout_seconds, 10.0),
            ),
        )

    @property
    def url(self) -> str:
        return self._url

    async def execute(self, code: str) -> ExecutionResult:
        start = time.monotonic()
        try:
            response = await self._client.post(self._url, json={"code": code})
        except httpx.ReadTimeout:
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.warning(
                "Remote execution timed out",
                extra={"backend": self.backend, "status": ExecutionStatus.TIMED_OUT.value, "duration_ms": duration_ms},
            )
            return ExecutionResult(
                stderr=timeout_message(self._timeout_seconds),
                status=ExecutionStatus.TIMED_OUT,
                duration_ms=duration_ms,
            )
        except httpx.TimeoutException as e:
            raise self._unavailable(f"request timed out before the snippet was accepted: {type(e).__name__}") from e
        except httpx.HTTPError as e:
            raise self._unavailable(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise self._unavailable(
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise self._unavailable("response is not valid JSON") from e

        if (
            not isinstance(body, dict)
            or not isinstance(body.get("stdout", ""), str)
            or not isinstance(body.get("stderr", ""), str)
        ):
            raise self._unavailable("response does not match {stdout, stderr}")

        result = ExecutionResult(
            stdout=body.get("stdout", ""),
            stderr=body.get("stderr", ""),
            status=_reported_status(body.get("stderr", "")),
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        logger.info(
            "Code execution finished",
            extra={"backend": self.backend, "status": result.status.value, "duration_ms": result.duration_ms},
        )
        return result

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _unavailable(self, message: str, details: dict | None = None) -> ExecutorUnavailableError:
        logger.error(
            f"Remote executor unavailable: {message}",
            extra={"backend": self.backend, "status": ExecutionStatus.FAILED.value},
        )
        return ExecutorUnavailableError(self._url, message, details=details)


def _reported_status(stderr: str) -> ExecutionStatus:
    """The service reports a timeout only through the marker line it appends."""
    lines = stderr.rstrip("\n").splitlines()
    if lines and lines[-1].startswith(TIMEOUT_MARKER):
        return ExecutionStatus.TIMED_OUT
    return ExecutionStatus.COMPLETED
