"""
Execution Manager - Invocation of resources, tools and prompts

Module: core.execution_manager
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Handler invocation layer
  - invoke_resource / invoke_tool / invoke_prompt
  - Field-by-field argument validation (presence, type, unknown fields)
  - Per-invocation deadline (descriptor timeout or server default)
  - Failures normalized into the error taxonomy
  - Bounded in-memory audit trail

[2025-11-23 v0.2.0-alpha] Initial implementation
  - Parameter validation against JSON Schema
  - Timeout and audit logging of all executions

ARCHITECTURE:
ExecutionManager runs one resolved capability:
  1. Validate arguments against the declared InputSchema (tools, prompts)
  2. Await the capability under a deadline
  3. Normalize the result into MCP content
  4. Normalize any failure into an MCPError subclass
  5. Record the invocation in the audit trail

A failure inside a capability never propagates as anything other than an
MCPError; the protocol handler turns that into a failure Response.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Deque, Dict, List, Optional, Type

from .errors import (
    MCPError,
    NotFoundError,
    InvalidArgumentsError,
    InvocationError,
    InvocationTimeoutError,
    ResourceError,
    ToolError,
    PromptError,
)
from ..protocol.content import ResourceReference, normalize_contents, normalize_messages
from ..prompts.prompt import Prompt
from ..resources.resource import ResourceDescriptor
from ..tools.tool import InputSchema, Tool

MAX_AUDIT_ENTRIES = 1000


@dataclass
class InvocationContext:
    """
    Context handed to tool and prompt capabilities

    Attributes:
        session_id: Session that issued the request
        request_id: Correlation id of the request
        received_at: When the request was received
    """
    session_id: Optional[str] = None
    request_id: Any = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ExecutionManager:
    """
    Executes capabilities and normalizes their outcome

    Coordinates validation, deadlines and failure normalization for every
    resource read, tool call and prompt rendering.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        """
        Initialize execution manager

        Args:
            default_timeout: Deadline in seconds applied when a descriptor
                declares none (None = unbounded)
        """
        self.logger = logging.getLogger("execution.manager")
        self.default_timeout = default_timeout

        # Execution audit trail
        self._execution_log: Deque[Dict[str, Any]] = deque(maxlen=MAX_AUDIT_ENTRIES)

    # ========================================================================
    # Invocation
    # ========================================================================

    async def invoke_resource(
        self,
        descriptor: ResourceDescriptor,
        uri: str,
        params: Dict[str, str],
    ) -> Dict[str, Any]:
        """
        Read a resource

        Args:
            descriptor: Resolved resource
            uri: Concrete URI requested by the client
            params: Placeholder values bound by the template

        Returns:
            dict: {"contents": [...]}

        Raises:
            MCPError: NotFoundError, UpstreamError or ResourceError
        """
        raw = await self._run(
            kind="resource",
            target=uri,
            awaitable=descriptor.read(uri, params),
            timeout=descriptor.timeout,
            error_class=ResourceError,
            failure_prefix=f"Failed to read resource {uri}",
        )
        try:
            contents = normalize_contents(raw, descriptor.mime_type)
        except TypeError as e:
            raise ResourceError(f"Failed to read resource {uri}: {e}")
        if any(isinstance(c, ResourceReference) for c in contents):
            raise ResourceError(f"Failed to read resource {uri}: references are not content")
        return {"contents": [c.to_resource_dict(uri) for c in contents]}

    async def invoke_tool(
        self,
        tool: Tool,
        arguments: Optional[Dict[str, Any]],
        context: Optional[InvocationContext] = None,
    ) -> Dict[str, Any]:
        """
        Call a tool

        Args:
            tool: Resolved tool
            arguments: Arguments supplied by the client
            context: Invocation context

        Returns:
            dict: {"content": [...], "isError": False}

        Raises:
            MCPError: InvalidArgumentsError, UpstreamError or ToolError
        """
        arguments = arguments or {}
        self._validate_arguments(arguments, tool.input_schema, f"tool {tool.name}")

        raw = await self._run(
            kind="tool",
            target=tool.name,
            awaitable=tool.execute(context or InvocationContext(), arguments),
            timeout=tool.timeout,
            error_class=ToolError,
            failure_prefix=f"Tool {tool.name} failed",
        )
        try:
            contents = normalize_contents(raw)
        except TypeError as e:
            raise ToolError(f"Tool {tool.name} returned invalid content: {e}")
        return {
            "content": [c.to_content_dict() for c in contents],
            "isError": False,
        }

    async def invoke_prompt(
        self,
        prompt: Prompt,
        arguments: Optional[Dict[str, Any]],
        context: Optional[InvocationContext] = None,
    ) -> Dict[str, Any]:
        """
        Render a prompt

        Args:
            prompt: Resolved prompt
            arguments: Arguments supplied by the client
            context: Invocation context

        Returns:
            dict: {"description": ..., "messages": [...]}

        Raises:
            MCPError: InvalidArgumentsError, UpstreamError or PromptError
        """
        arguments = arguments or {}
        if prompt.input_schema is not None:
            self._validate_arguments(arguments, prompt.input_schema, f"prompt {prompt.name}")
        elif arguments:
            name = next(iter(arguments))
            raise InvalidArgumentsError(
                f"Prompt {prompt.name} takes no arguments, got '{name}'",
                field=name,
            )

        raw = await self._run(
            kind="prompt",
            target=prompt.name,
            awaitable=prompt.render(context or InvocationContext(), arguments),
            timeout=prompt.timeout,
            error_class=PromptError,
            failure_prefix=f"Prompt {prompt.name} failed",
        )
        try:
            messages = normalize_messages(raw)
        except (TypeError, ValueError) as e:
            raise PromptError(f"Prompt {prompt.name} returned invalid messages: {e}")

        result = {"messages": [m.to_dict() for m in messages]}
        if prompt.description:
            result["description"] = prompt.description
        return result

    # ========================================================================
    # Internals
    # ========================================================================

    async def _run(
        self,
        kind: str,
        target: str,
        awaitable: Awaitable[Any],
        timeout: Optional[float],
        error_class: Type[InvocationError],
        failure_prefix: str,
    ) -> Any:
        """
        Await a capability under a deadline and normalize failures

        Raises:
            MCPError: Always an MCPError subclass on failure
        """
        deadline = timeout if timeout is not None else self.default_timeout
        start_time = time.monotonic()

        try:
            if deadline is None:
                result = await awaitable
            else:
                result = await asyncio.wait_for(awaitable, timeout=deadline)

        except asyncio.TimeoutError:
            self._log_execution(kind, target, "timeout", start_time)
            raise InvocationTimeoutError(
                f"{failure_prefix}: no result after {deadline}s"
            )

        except MCPError as e:
            self._log_execution(kind, target, e.kind, start_time, error=e.message)
            raise

        except FileNotFoundError as e:
            self._log_execution(kind, target, "not_found", start_time, error=str(e))
            raise NotFoundError(f"{failure_prefix}: {e.strerror or e}")

        except Exception as e:
            self.logger.debug(f"{kind} {target} raised", exc_info=True)
            self._log_execution(kind, target, "error", start_time, error=str(e))
            raise error_class(f"{failure_prefix}: {e or type(e).__name__}")

        self._log_execution(kind, target, "success", start_time)
        return result

    def _validate_arguments(
        self,
        arguments: Dict[str, Any],
        schema: InputSchema,
        owner: str,
    ) -> None:
        """
        Validate arguments against an input shape

        Args:
            arguments: Supplied arguments
            schema: Declared input shape
            owner: "tool <name>" / "prompt <name>" for messages

        Raises:
            InvalidArgumentsError: Naming the first offending field
        """
        if not isinstance(arguments, dict):
            raise InvalidArgumentsError(f"Arguments for {owner} must be an object")

        for name in schema.required:
            if name not in arguments or arguments[name] is None:
                raise InvalidArgumentsError(
                    f"Missing required argument '{name}' for {owner}",
                    field=name,
                )

        for name, value in arguments.items():
            spec = schema.properties.get(name)
            if spec is None:
                raise InvalidArgumentsError(
                    f"Unknown argument '{name}' for {owner}",
                    field=name,
                )
            if value is None and not schema.is_required(name):
                continue
            expected_type = spec.get("type")
            if expected_type and not self._check_type(value, expected_type):
                raise InvalidArgumentsError(
                    f"Invalid type for argument '{name}' of {owner}: "
                    f"expected {expected_type}, got {type(value).__name__}",
                    field=name,
                )

    def _check_type(self, value: Any, expected_type: str) -> bool:
        """
        Check if value matches expected JSON Schema type

        Booleans are never accepted as numbers.
        """
        if expected_type in ("number", "integer") and isinstance(value, bool):
            return False

        type_map = {
            "string": str,
            "number": (int, float),
            "integer": int,
            "boolean": bool,
            "array": list,
            "object": dict,
        }

        if expected_type not in type_map:
            return True
        return isinstance(value, type_map[expected_type])

    def _log_execution(
        self,
        kind: str,
        target: str,
        status: str,
        start_time: float,
        error: Optional[str] = None,
    ) -> None:
        """Record one invocation in the audit trail"""
        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "kind": kind,
            "target": target,
            "status": status,
            "execution_time_ms": elapsed_ms,
        }
        if error is not None:
            entry["error"] = error[:500]

        self._execution_log.append(entry)

        if status == "success":
            self.logger.info(f"{kind} {target} succeeded ({elapsed_ms}ms)")
        else:
            self.logger.warning(f"{kind} {target} failed: {status} ({elapsed_ms}ms)")

    def get_execution_log(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Get recent audit entries, newest last

        Args:
            limit: Max number of entries to return
        """
        entries = list(self._execution_log)
        if limit is not None:
            entries = entries[-limit:]
        return entries
