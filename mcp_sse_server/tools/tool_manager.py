"""
Tool Manager - Central registry for tools

Module: tools.tool_manager
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Registry contract
  - Duplicate names raise DuplicateNameError
  - resolve() raises NotFoundError for unknown names
  - Registration order preserved for tools/list

[2025-11-23 v0.2.0-alpha] Initial implementation
  - Tool registration and retrieval
  - Decorator support via tool() method
  - Tool info exposure for MCP clients

ARCHITECTURE:
ToolManager is the tool table of the CapabilityRegistry.
Responsibilities:
  - Store registered tools in registration order
  - Resolve a tool by exact name
  - Expose tool info to clients
  - Support decorator-based registration
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .tool import Tool, FunctionTool
from ..core.errors import DuplicateNameError, NotFoundError


class ToolManager:
    """
    Central registry and manager for MCP tools

    Stores all registered tools and provides methods to access and list them.
    """

    def __init__(self):
        """Initialize tool manager"""
        self.logger = logging.getLogger("tools.manager")
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool

        Args:
            tool: Tool instance to register

        Raises:
            DuplicateNameError: If tool with same name already exists
        """
        if tool.name in self._tools:
            raise DuplicateNameError(f"Tool already registered: {tool.name}")

        self._tools[tool.name] = tool
        self.logger.info(f"Tool registered: {tool.name}")

    def unregister(self, tool_name: str) -> None:
        """
        Unregister a tool

        Args:
            tool_name: Name of tool to unregister
        """
        if tool_name in self._tools:
            del self._tools[tool_name]
            self.logger.info(f"Tool unregistered: {tool_name}")

    def resolve(self, tool_name: str) -> Tool:
        """
        Resolve a tool by exact name

        Raises:
            NotFoundError: If no tool has this name
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise NotFoundError(f"Tool not found: {tool_name}")
        return tool

    def list_all(self) -> List[Tool]:
        """All tools in registration order"""
        return list(self._tools.values())

    def count(self) -> int:
        return len(self._tools)

    def get_info_list(self) -> List[Dict[str, Any]]:
        """
        Get list of tool info for MCP exposure

        Returns:
            list: Tool info dictionaries for the tools/list response
        """
        return [tool.get_info() for tool in self._tools.values()]

    def tool(
        self,
        name: str,
        description: str,
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Decorator to register a tool

        Usage:
            @tool_manager.tool(
                name="add",
                description="Add two numbers together",
                input_schema={"a": {"type": "number"}, "b": {"type": "number"}},
            )
            async def add(ctx, params):
                return str(params["a"] + params["b"])

        Returns:
            decorator: Function decorator
        """

        def decorator(func: Callable):
            self.register(
                FunctionTool(
                    name=name,
                    description=description,
                    func=func,
                    input_schema=input_schema,
                    timeout=timeout,
                )
            )
            return func

        return decorator
