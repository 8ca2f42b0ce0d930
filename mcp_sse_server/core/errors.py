"""
Error taxonomy for the MCP SSE Server

Module: core.errors
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - MCPError base class carrying a JSON-RPC code and a kind tag
  - Lookup, validation, session, upstream and framing errors
  - Invocation errors for resource / tool / prompt capabilities

ARCHITECTURE:
Every failure that can reach a client is an MCPError subclass. The protocol
handler turns it into a JSON-RPC error object:

    {"code": <code>, "message": <message>, "data": {"kind": <class name>}}

DuplicateNameError is the exception: it only happens while capabilities are
registered at startup and aborts initialization.
"""

from typing import Any, Dict, Optional

from .constants import (
    PARSE_ERROR,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    RESOURCE_NOT_FOUND,
    SESSION_NOT_FOUND,
    UPSTREAM_ERROR,
    EXECUTION_ERROR,
)


class MCPError(Exception):
    """Base class for errors reported to clients"""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[int] = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    @property
    def kind(self) -> str:
        """Tag identifying the failure kind"""
        return type(self).__name__

    def error_data(self) -> Dict[str, Any]:
        """Extra data attached to the JSON-RPC error"""
        return {"kind": self.kind}

    def to_error_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-RPC error object"""
        return {
            "code": self.code,
            "message": self.message,
            "data": self.error_data(),
        }


class NotFoundError(MCPError):
    """Unknown resource URI, tool name or prompt name"""

    code = RESOURCE_NOT_FOUND


class InvalidArgumentsError(MCPError):
    """Arguments do not match the declared input shape"""

    code = INVALID_PARAMS

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)

    def error_data(self) -> Dict[str, Any]:
        data = super().error_data()
        if self.field is not None:
            data["field"] = self.field
        return data


class DuplicateNameError(MCPError):
    """Registration conflict (startup-time only)"""


class SessionNotFoundError(MCPError):
    """Message posted against an unknown or closed session"""

    code = SESSION_NOT_FOUND

    def __init__(self, session_id: Optional[str]):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class UpstreamError(MCPError):
    """An external collaborator failed or returned a non-success status"""

    code = UPSTREAM_ERROR


class MissingCredentialError(UpstreamError):
    """A credential required by an outbound capability is not configured"""


class InvocationTimeoutError(UpstreamError):
    """A capability did not finish before its deadline"""


class MalformedRequestError(MCPError):
    """The request frame could not be decoded"""

    code = PARSE_ERROR

    def __init__(self, message: str, code: int = PARSE_ERROR):
        super().__init__(message, code)


class MethodNotFoundError(MCPError):
    """JSON-RPC method not served by this endpoint"""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Method not found: {method}")


class InvocationError(MCPError):
    """A capability raised while producing its result"""

    code = EXECUTION_ERROR


class ResourceError(InvocationError):
    """Resource producer failure"""


class ToolError(InvocationError):
    """Tool executor failure"""


class PromptError(InvocationError):
    """Prompt producer failure"""


__all__ = [
    "MCPError",
    "NotFoundError",
    "InvalidArgumentsError",
    "DuplicateNameError",
    "SessionNotFoundError",
    "UpstreamError",
    "MissingCredentialError",
    "InvocationTimeoutError",
    "MalformedRequestError",
    "MethodNotFoundError",
    "InvocationError",
    "ResourceError",
    "ToolError",
    "PromptError",
]
