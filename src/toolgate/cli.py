"""
Toolgate CLI

Commands:
    toolgate serve              — Start the chat API server
    toolgate executor           — Start the remote executor service
    toolgate run-code FILE      — Run a snippet through the configured executor
    toolgate tools              — List registered tool schemas
    toolgate status             — Show configuration and dependency status
"""

from __future__ import annotations

import asyncio
import importlib
import json
import os
import sys

import click

from toolgate import __version__
from toolgate.config import Settings, create_executor
from toolgate.exceptions import ToolgateError
from toolgate.tools.builtin import build_registry


@click.group()
@click.version_option(version=__version__, prog_name="toolgate")
def cli() -> None:
    """Toolgate — tool-invocation gateway with sandboxed code execution"""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port number (default: PORT or 3001)")
@click.option("--reload", is_flag=True, help="Auto-reload on changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the chat API server."""
    settings = Settings.from_env()
    _serve("toolgate.api.server:app", host or settings.host, port or settings.port, reload)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", default=8080, type=int, help="Port number")
def executor(host: str, port: int) -> None:
    """Start the remote executor service."""
    _serve("toolgate.api.executor_service:app", host, port, reload=False)


@cli.command("run-code")
@click.argument("source", type=click.File("r"))
@click.option("--json-output", is_flag=True, help="Print the result as JSON")
def run_code(source, json_output: bool) -> None:
    """Run the Python in SOURCE ('-' for stdin) through the configured executor."""
    settings = Settings.from_env()
    code_executor = create_executor(settings)
    if code_executor is None:
        raise click.ClickException("Code execution is disabled (CODE_EXECUTION_ENABLED=false)")

    async def _run():
        try:
            return await code_executor.execute(source.read())
        finally:
            await code_executor.aclose()

    try:
        result = asyncio.run(_run())
    except ToolgateError as e:
        raise click.ClickException(str(e)) from e

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    if result.stdout:
        click.echo(result.stdout, nl=not result.stdout.endswith("\n"))
    if result.stderr:
        click.echo(result.stderr, err=True, nl=not result.stderr.endswith("\n"))
    if result.timed_out:
        sys.exit(124)


@cli.command()
def tools() -> None:
    """List the tools the chat agent is wired with."""
    settings = Settings.from_env()
    registry = build_registry(create_executor(settings))
    click.echo(json.dumps(registry.get_schemas(), indent=2))


@cli.command()
def status() -> None:
    """Show configuration and dependency status."""
    settings = Settings.from_env()

    _print_header("Toolgate Status")
    click.echo(f"  Version: {__version__}")
    click.echo(f"  Python: {sys.version.split()[0]}")
    click.echo(f"  Model: {settings.model}")
    click.echo(f"  Executor: {settings.executor_backend}")
    if settings.executor_url:
        click.echo(f"  Executor URL: {settings.executor_url}")

    deps = {
        "anthropic": "Anthropic SDK",
        "fastapi": "API Server",
        "uvicorn": "ASGI server",
        "httpx": "Remote executor client",
    }
    click.echo("\n  Dependencies:")
    for pkg, label in deps.items():
        try:
            mod = importlib.import_module(pkg)
            version = getattr(mod, "__version__", "installed")
            click.echo(f"    {label:24s} {pkg:20s} {version}")
        except ImportError:
            click.echo(f"    {label:24s} {pkg:20s} NOT INSTALLED")

    click.echo("\n  Environment:")
    for var in ("ANTHROPIC_API_KEY", "EXECUTOR_URL"):
        value = os.environ.get(var)
        if value:
            masked = value[:4] + "..." + value[-4:] if len(value) > 10 else "***"
            click.echo(f"    {var:30s} {masked}")
        else:
            click.echo(f"    {var:30s} NOT SET")


def _serve(app_path: str, host: str, port: int, reload: bool) -> None:
    import uvicorn

    _print_header(f"Toolgate ({app_path})")
    click.echo(f"  Binding: {host}:{port}")
    click.echo(f"  Reload: {'enabled' if reload else 'disabled'}")
    click.echo()

    uvicorn.run(app_path, host=host, port=port, reload=reload)


def _print_header(title: str) -> None:
    click.echo(f"\n  {'=' * 60}")
    click.echo(f"  {title}")
    click.echo(f"  {'=' * 60}\n")


if __name__ == "__main__":
    cli()
