"""Registry and context shared by every tool plugin."""

from __future__ import annotations

from .interfaces import BaseTool, ToolContext, ToolInput
from .pipeline import ToolRegistry, register_tool, registry

__all__ = ["BaseTool", "ToolContext", "ToolInput", "ToolRegistry", "register_tool", "registry"]
