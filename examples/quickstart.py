"""Toolgate quickstart: invoke tools through the registry in a few lines."""

import asyncio

from toolgate import InvocationRequest, SandboxedExecutor, build_registry


async def main() -> None:
    registry = build_registry(SandboxedExecutor())

    product = await registry.invoke(
        InvocationRequest(tool_name="Multiply", raw_arguments={"a": 3, "b": 4})
    )
    print(product)

    result = await registry.invoke(
        InvocationRequest(
            tool_name="run_python_code",
            raw_arguments={"code": "import math\nprint(math.factorial(20))"},
        )
    )
    print(f"stdout: {result.stdout.strip()}")
    print(f"stderr: {result.stderr.strip() or '(empty)'}")


asyncio.run(main())
