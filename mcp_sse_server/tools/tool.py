"""
Tool Module - Base class for MCP Tools

Module: tools.tool
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Typed argument shapes
  - InputSchema accepts a JSON Schema or a flat field mapping
  - Fields are required unless marked optional
  - Tools carry an optional invocation deadline
  - Executors may be plain functions or coroutines

[2025-11-23 v0.2.0-alpha] Initial implementation
  - Abstract Tool class
  - InputSchema support
  - Tools can be registered with @server.tool()

ARCHITECTURE:
Tool is the abstract base class for all invocable tools.
Each tool:
  - Has a unique name
  - Declares its input shape (named fields, primitive type, required flag)
  - Implements execute(context, arguments)
  - Is registered with the ToolManager

Tools are exposed to clients via tools/list.
Clients call tools via tools/call; arguments are validated by the
ExecutionManager before execute() runs.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

PRIMITIVE_TYPES = ("string", "number", "integer", "boolean", "array", "object")


@dataclass
class InputSchema:
    """JSON Schema describing named input fields"""

    properties: Dict[str, Any] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    type: str = "object"

    def __post_init__(self):
        for name, spec in self.properties.items():
            field_type = spec.get("type")
            if field_type is not None and field_type not in PRIMITIVE_TYPES:
                raise ValueError(f"Unsupported type for field '{name}': {field_type}")
        for name in self.required:
            if name not in self.properties:
                raise ValueError(f"Required field '{name}' is not declared")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON Schema format"""
        schema = {
            "type": self.type,
            "properties": self.properties,
        }
        if self.required:
            schema["required"] = self.required
        return schema

    def is_required(self, name: str) -> bool:
        return name in self.required

    @staticmethod
    def create(
        schema: Optional[Dict[str, Any]] = None,
        required: Optional[List[str]] = None,
    ) -> "InputSchema":
        """
        Create InputSchema from a dict

        Two forms are accepted:
          - JSON Schema: {"type": "object", "properties": {...}, "required": [...]}
          - Flat fields: {"a": {"type": "number"}, "count": {"type": "number", "optional": True}}
            where every field is required unless marked optional

        Args:
            schema: Schema or field mapping
            required: Explicit required list (overrides the defaults)
        """
        schema = schema or {}
        if "properties" in schema:
            properties = dict(schema["properties"])
            required_fields = list(schema.get("required", []))
        else:
            properties = {}
            required_fields = []
            for name, spec in schema.items():
                spec = dict(spec)
                if not spec.pop("optional", False):
                    required_fields.append(name)
                properties[name] = spec

        if required is not None:
            required_fields = list(required)

        return InputSchema(properties, required_fields)


class Tool(ABC):
    """
    Abstract base class for MCP tools

    All tools must inherit from this class and implement the execute()
    method.

    Attributes:
        name: Unique identifier for the tool
        description: Human-readable description for clients
        input_schema: InputSchema describing the arguments
        timeout: Invocation deadline in seconds (None = server default)
    """

    name: str
    description: str
    input_schema: InputSchema
    timeout: Optional[float] = None

    def __init__(self):
        """Initialize tool"""
        if not getattr(self, "name", None):
            raise ValueError("Tool must have a 'name' attribute")
        if not hasattr(self, "description"):
            raise ValueError("Tool must have a 'description' attribute")
        if not hasattr(self, "input_schema"):
            self.input_schema = InputSchema()

        self.logger = logging.getLogger(f"tools.{self.name}")

    @abstractmethod
    async def execute(self, context, arguments: Dict[str, Any]) -> Any:
        """
        Execute the tool

        Args:
            context: InvocationContext of the calling request
            arguments: Arguments (already validated against input_schema)

        Returns:
            Any value accepted by protocol.content.normalize_contents

        Raises:
            Exception: Any failure (normalized by the ExecutionManager)
        """

    def get_info(self) -> Dict[str, Any]:
        """
        Get tool information for MCP exposure

        Returns:
            dict: Tool metadata in MCP format
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_dict(),
        }

    def __repr__(self) -> str:
        return f"Tool({self.name})"


class FunctionTool(Tool):
    """
    Tool implemented as a simple function

    Wraps a function(context, arguments) as a Tool. Used for
    decorator-based registration.
    """

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable,
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize function-based tool

        Args:
            name: Tool name
            description: Tool description
            func: Callable(context, arguments), sync or async
            input_schema: Input shape (see InputSchema.create)
            timeout: Invocation deadline in seconds
        """
        self.name = name
        self.description = description
        self._func = func
        self.input_schema = InputSchema.create(input_schema)
        self.timeout = timeout

        super().__init__()

    async def execute(self, context, arguments: Dict[str, Any]) -> Any:
        """Execute the wrapped function"""
        result = self._func(context, arguments)
        if inspect.isawaitable(result):
            result = await result
        return result
