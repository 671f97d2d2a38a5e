"""Tool system for Voice Hours."""

from voice_hours.tools.registry import Tool, ToolOutput, ToolRegistry, get_default_registry

__all__ = ["Tool", "ToolOutput", "ToolRegistry", "get_default_registry"]
