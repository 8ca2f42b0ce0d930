"""
Prompt Module - Parametrized message templates

Module: prompts.prompt
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Abstract Prompt class mirroring Tool
  - FunctionPrompt for decorator registration
  - Optional argument shape, exposed as MCP prompt arguments

ARCHITECTURE:
A prompt produces an ordered list of role-tagged messages. Message content
is text or a ResourceReference that the client resolves on its own; the
server never reads referenced resources while rendering a prompt.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from ..tools.tool import InputSchema


class Prompt(ABC):
    """
    Abstract base class for MCP prompts

    Attributes:
        name: Unique prompt name
        description: Human-readable description
        input_schema: Argument shape (None when the prompt takes no arguments)
        timeout: Invocation deadline in seconds (None = server default)
    """

    name: str
    description: str = ""
    input_schema: Optional[InputSchema] = None
    timeout: Optional[float] = None

    @abstractmethod
    async def render(self, context, arguments: Dict[str, Any]) -> Any:
        """
        Render the prompt messages

        Args:
            context: InvocationContext of the calling request
            arguments: Validated arguments

        Returns:
            Any value accepted by protocol.content.normalize_messages
        """

    def get_arguments_info(self) -> List[Dict[str, Any]]:
        if self.input_schema is None:
            return []
        arguments = []
        for name, spec in self.input_schema.properties.items():
            argument = {
                "name": name,
                "required": self.input_schema.is_required(name),
            }
            if spec.get("description"):
                argument["description"] = spec["description"]
            arguments.append(argument)
        return arguments

    def get_info(self) -> Dict[str, Any]:
        """MCP prompt metadata for prompts/list"""
        info = {"name": self.name}
        if self.description:
            info["description"] = self.description
        arguments = self.get_arguments_info()
        if arguments:
            info["arguments"] = arguments
        return info

    def __repr__(self) -> str:
        return f"Prompt({self.name})"


class FunctionPrompt(Prompt):
    """Prompt implemented as a function(context, arguments)"""

    def __init__(
        self,
        name: str,
        func: Callable,
        description: str = "",
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        if not name:
            raise ValueError("Prompt must have a name")
        self.name = name
        self.description = description
        self._func = func
        self.input_schema = (
            InputSchema.create(input_schema) if input_schema is not None else None
        )
        self.timeout = timeout

    async def render(self, context, arguments: Dict[str, Any]) -> Any:
        result = self._func(context, arguments)
        if inspect.isawaitable(result):
            result = await result
        return result
