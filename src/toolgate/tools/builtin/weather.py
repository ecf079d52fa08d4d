"""Weather tool: canned stand-in for a real weather lookup."""

from toolgate.logging import get_logger
from toolgate.tools.models import ArgumentField
from toolgate.tools.registry import ToolDescriptor

logger = get_logger("toolgate.tools.builtin.weather")

WEATHER_REPORT = "The Weather of Tokyo is Sunny"


def _weather(query: str) -> str:
    # The query is not inspected; every location gets the same report.
    logger.info(f"Weather lookup: {query!r}", extra={"tool_name": "Weather"})
    return WEATHER_REPORT


WEATHER_TOOL = ToolDescriptor(
    name="Weather",
    description="get the weather of a given location",
    argument_schema={
        "query": ArgumentField(type="string", description="Location to get the weather for"),
    },
    handler=_weather,
)
