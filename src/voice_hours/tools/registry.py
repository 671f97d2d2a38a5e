"""Tool registry system for managing available tools."""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Coroutine

from voice_hours.errors import VoiceHoursError

logger = logging.getLogger(__name__)


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # "string", "integer", "boolean", "number"
    description: str
    required: bool = True
    enum: list[str] | None = None
    default: Any = None


@dataclass
class ToolOutput:
    """What a tool hands back: a sentence to speak plus optional structured data."""

    text: str
    data: dict[str, Any] | None = None
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"result": self.text, "data": self.data, "isError": self.is_error}


@dataclass
class Tool:
    """Definition of a tool exposed to voice agents."""

    name: str
    description: str
    parameters: list[ToolParameter] = field(default_factory=list)
    handler: Callable[..., Coroutine[Any, Any, ToolOutput]] | None = None
    title: str | None = None
    apology: str = "I'm sorry, something went wrong."  # Prefix for spoken error replies
    action: str | None = None  # e.g. "check business hours", used in unexpected-error text

    def to_schema(self) -> dict[str, Any]:
        """Convert to JSON schema format."""
        properties: dict[str, Any] = {}
        for p in self.parameters:
            properties[p.name] = {
                "type": p.type,
                "description": p.description,
            }
            if p.enum:
                properties[p.name]["enum"] = p.enum
            if p.default is not None:
                properties[p.name]["default"] = p.default

        return {
            "name": self.name,
            "title": self.title or self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": properties,
                "required": [p.name for p in self.parameters if p.required],
            },
        }

    def bind_arguments(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Check arguments against the parameter list and fill in defaults.

        Raises:
            ValueError: If a required argument is missing or an enum value
                is not allowed.
        """
        bound: dict[str, Any] = {}
        for p in self.parameters:
            value = arguments.get(p.name)
            if value is None or value == "":
                if p.required:
                    raise ValueError(f"Missing required argument '{p.name}'")
                if p.default is None:
                    continue
                value = p.default
            if p.enum:
                value = self._match_enum(p, value)
            bound[p.name] = value
        return bound

    @staticmethod
    def _match_enum(param: ToolParameter, value: Any) -> str:
        """Map a value onto the canonical enum string, ignoring case and type."""
        text = str(value).strip().lower()
        for choice in param.enum or []:
            if choice.lower() == text:
                return choice
        raise ValueError(
            f"Invalid value for '{param.name}': {value}. Must be one of: {', '.join(param.enum or [])}"
        )


class ToolRegistry:
    """Registry of available tools."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools."""
        return list(self._tools.values())

    def get_schemas(self) -> list[dict[str, Any]]:
        """Get schemas for all tools."""
        return [tool.to_schema() for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any] | None = None) -> ToolOutput:
        """Execute a tool by name with given arguments.

        Failures never escape: validation and timezone errors become an
        apology carrying the error text, and anything else is logged and
        reported the same way.

        Args:
            name: Tool name.
            arguments: Arguments to pass to the tool.

        Returns:
            ToolOutput, with ``is_error`` set when the call failed.
        """
        tool = self._tools.get(name)
        if not tool:
            return ToolOutput(text=f"Error: Unknown tool '{name}'", is_error=True)

        if not tool.handler:
            return ToolOutput(text=f"Error: Tool '{name}' has no handler", is_error=True)

        try:
            bound = tool.bind_arguments(arguments or {})
        except ValueError as e:
            return ToolOutput(text=f"{tool.apology} Invalid arguments - {e}", is_error=True)

        try:
            return await tool.handler(**bound)
        except VoiceHoursError as e:
            logger.info("%s rejected input: %s", name, e)
            return ToolOutput(text=f"{tool.apology} {e}", is_error=True)
        except Exception as e:
            logger.exception("Unexpected failure in tool %s", name)
            action = tool.action or f"run {name}"
            return ToolOutput(text=f"{tool.apology} Failed to {action}: {e}", is_error=True)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


@lru_cache
def get_default_registry() -> ToolRegistry:
    """Get the default tool registry with the business tools."""
    from voice_hours.tools.business import get_business_tools

    registry = ToolRegistry()

    for tool in get_business_tools():
        registry.register(tool)

    return registry
