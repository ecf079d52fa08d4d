"""
Toolgate Code Execution Sandbox

Defines the CodeExecutor capability shared by the local and remote
backends, and the local backend itself:

- Code runs in a fresh `python -I -u` subprocess, one per call
- Clean environment (host env vars, API keys included, are not inherited)
- stdout/stderr captured through per-call pipes, so there is no
  process-wide stream redirection to install or restore
- Timeout enforcement via asyncio.wait_for + process-group kill, keeping
  whatever output was produced before the deadline
- Output size limits (configurable max bytes)
- A semaphore bounding concurrent local executions
- The snippet's whole process session is killed when the call ends,
  cancellation included

Note: This is NOT a true sandbox. The subprocess runs as the same user
with full filesystem and network access; what the snippet does with them
is the caller's risk. For real isolation run the remote executor service
inside a container and point EXECUTOR_URL at it.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import sys
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from toolgate.exceptions import ExecutionFailedError
from toolgate.logging import get_logger
from toolgate.tools.models import TIMEOUT_MARKER, ExecutionResult, ExecutionStatus

logger = get_logger("toolgate.tools.sandbox")

_READ_CHUNK = 4096
# Grace period for the pipe readers once the child has been killed
_DRAIN_GRACE_SECONDS = 1.0
_POLL_INTERVAL_SECONDS = 0.02


class CodeExecutor(ABC):
    """Capability interface for running a code snippet and capturing its output."""

    backend: str = "abstract"

    @abstractmethod
    async def execute(self, code: str) -> ExecutionResult:
        """Run `code` and return its captured stdout/stderr."""

    async def aclose(self) -> None:
        """Release backend resources (optional)."""
        pass


class SandboxConfig(BaseModel):
    """Configuration for local sandboxed execution."""

    timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)
    max_output_bytes: int = Field(default=65536, ge=1024, le=1048576)
    max_concurrent: int = Field(default=1, ge=1, le=64)
    filesystem_root: str | None = None
    extra_env: dict[str, str] = Field(default_factory=dict)
    python_executable: str | None = None


def timeout_message(timeout_seconds: float) -> str:
    return f"{TIMEOUT_MARKER} Code execution exceeded {timeout_seconds:g}s limit"


def append_line(text: str, line: str) -> str:
    if not text:
        return line
    return text.rstrip("\n") + "\n" + line


async def _drain(stream: asyncio.StreamReader, limit: int) -> tuple[bytes, bool]:
    """Read a pipe to EOF, keeping at most `limit` bytes.

    Keeps reading past the limit so the child never blocks on a full pipe.
    """
    buf = bytearray()
    truncated = False
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        room = limit - len(buf)
        if room > 0:
            buf.extend(chunk[:room])
        if len(chunk) > room:
            truncated = True
    return bytes(buf), truncated


def _decode(data: bytes, truncated: bool, limit: int) -> str:
    text = data.decode("utf-8", errors="replace")
    if truncated:
        text += f"\n[TRUNCATED at {limit} bytes]"
    return text


async def _wait_exit(proc: asyncio.subprocess.Process) -> int:
    """Wait for the child itself to exit.

    Process.wait() also waits for the pipes to close, which a background
    process started by the snippet can hold open indefinitely.
    """
    while proc.returncode is None:
        await asyncio.sleep(_POLL_INTERVAL_SECONDS)
    return proc.returncode


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass


class SandboxedExecutor(CodeExecutor):
    """Executes Python snippets in a subprocess with timeout enforcement.

    Provides: timeout (kill on exceed), clean env vars, output size caps,
    per-call output capture. Does NOT provide: OS-level isolation,
    resource limits (memory/CPU), or network firewalling.
    """

    backend = "local"

    def __init__(self, config: SandboxConfig | None = None):
        self._config = config or SandboxConfig()
        self._slots = asyncio.Semaphore(self._config.max_concurrent)

    @property
    def config(self) -> SandboxConfig:
        return self._config

    async def execute(self, code: str, config: SandboxConfig | None = None) -> ExecutionResult:
        """Execute Python code in a sandboxed subprocess.

        An exception raised by the snippet ends up in stderr and still
        yields a COMPLETED result. Only a failure of the harness itself
        (interpreter missing, temp dir not writable) raises
        ExecutionFailedError.
        """
        cfg = config or self._config
        async with self._slots:
            try:
                with tempfile.TemporaryDirectory(prefix="toolgate_sandbox_") as workdir:
                    script = Path(workdir) / "snippet.py"
                    script.write_text(code, encoding="utf-8")
                    result = await self._run(script, workdir, cfg)
            except OSError as e:
                logger.error(
                    f"Sandbox harness failure: {e}",
                    extra={"backend": self.backend, "status": ExecutionStatus.FAILED.value},
                )
                raise ExecutionFailedError(
                    f"Sandbox harness failed: {e}",
                    details={"error_type": type(e).__name__},
                ) from e

        logger.info(
            "Code execution finished",
            extra={
                "backend": self.backend,
                "status": result.status.value,
                "exit_code": result.exit_code,
                "duration_ms": result.duration_ms,
            },
        )
        return result

    def _build_env(self, cfg: SandboxConfig, workdir: str) -> dict[str, str]:
        env = {
            "PATH": "/usr/bin:/usr/local/bin:/bin",
            "HOME": workdir,
            "LANG": "en_US.UTF-8",
        }
        env.update(cfg.extra_env)
        return env

    async def _run(self, script: Path, workdir: str, cfg: SandboxConfig) -> ExecutionResult:
        start = time.monotonic()
        proc = await asyncio.create_subprocess_exec(
            cfg.python_executable or sys.executable,
            "-I",
            "-u",
            str(script),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self._build_env(cfg, workdir),
            cwd=cfg.filesystem_root or workdir,
            start_new_session=True,
        )

        readers = [
            asyncio.create_task(_drain(proc.stdout, cfg.max_output_bytes)),
            asyncio.create_task(_drain(proc.stderr, cfg.max_output_bytes)),
        ]

        timed_out = False
        try:
            try:
                await asyncio.wait_for(_wait_exit(proc), timeout=cfg.timeout_seconds)
            except TimeoutError:
                timed_out = True

            # Anything the snippet left behind in its session goes too, so
            # the pipes reach EOF.
            _kill_group(proc)
            await _wait_exit(proc)
            done, _ = await asyncio.wait(readers, timeout=_DRAIN_GRACE_SECONDS)
        finally:
            if proc.returncode is None:
                _kill_group(proc)
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(_wait_exit(proc), timeout=_DRAIN_GRACE_SECONDS)
            for task in readers:
                task.cancel()
            await asyncio.gather(*readers, return_exceptions=True)

        captured = []
        for task in readers:
            if task in done and not task.cancelled() and task.exception() is None:
                data, truncated = task.result()
                captured.append(_decode(data, truncated, cfg.max_output_bytes))
            else:
                captured.append("")
        stdout, stderr = captured

        status = ExecutionStatus.COMPLETED
        if timed_out:
            status = ExecutionStatus.TIMED_OUT
            stderr = append_line(stderr, timeout_message(cfg.timeout_seconds))

        return ExecutionResult(
            stdout=stdout,
            stderr=stderr,
            status=status,
            exit_code=proc.returncode,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
