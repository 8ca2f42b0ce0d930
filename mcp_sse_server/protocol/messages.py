"""
Protocol Messages - Decoded requests and correlated responses

Module: protocol.messages
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - RequestKind enum with one typed params class per kind
  - JSON-RPC 2.0 frame decoding (requests and notifications)
  - Response with success / failure outcome

ARCHITECTURE:
decode_request() turns one posted frame into either:
  - a Request: correlation id + RequestKind + typed params
  - a Notification: method without id (never answered)

Failures:
  - undecodable frame (bad JSON, not an object, no method, bad id)
      -> MalformedRequestError (no correlation id)
  - unknown method                  -> MethodNotFoundError (correlated)
  - known method, ill-shaped params -> InvalidArgumentsError (correlated)

The correlated failures are carried by RequestDecodeError so the caller
still has the id to answer with.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..core.constants import (
    JSONRPC_VERSION,
    INVALID_REQUEST,
    METHOD_INITIALIZE,
    METHOD_PING,
    METHOD_RESOURCES_READ,
    METHOD_RESOURCES_LIST,
    METHOD_RESOURCES_TEMPLATES_LIST,
    METHOD_TOOLS_CALL,
    METHOD_TOOLS_LIST,
    METHOD_PROMPTS_GET,
    METHOD_PROMPTS_LIST,
)
from ..core.errors import (
    MCPError,
    InvalidArgumentsError,
    MalformedRequestError,
    MethodNotFoundError,
)

RequestId = Union[str, int]


class RequestKind(Enum):
    """Request kinds served by the dispatch loop (value = JSON-RPC method)"""
    INITIALIZE = METHOD_INITIALIZE
    PING = METHOD_PING
    READ_RESOURCE = METHOD_RESOURCES_READ
    LIST_RESOURCES = METHOD_RESOURCES_LIST
    LIST_RESOURCE_TEMPLATES = METHOD_RESOURCES_TEMPLATES_LIST
    CALL_TOOL = METHOD_TOOLS_CALL
    LIST_TOOLS = METHOD_TOOLS_LIST
    GET_PROMPT = METHOD_PROMPTS_GET
    LIST_PROMPTS = METHOD_PROMPTS_LIST


# ============================================================================
# Typed params
# ============================================================================

@dataclass(frozen=True)
class InitializeParams:
    protocol_version: Optional[str] = None
    client_info: Dict[str, Any] = field(default_factory=dict)
    capabilities: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PingParams:
    pass


@dataclass(frozen=True)
class ListParams:
    cursor: Optional[str] = None


@dataclass(frozen=True)
class ReadResourceParams:
    uri: str


@dataclass(frozen=True)
class CallToolParams:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GetPromptParams:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


RequestParams = Union[
    InitializeParams,
    PingParams,
    ListParams,
    ReadResourceParams,
    CallToolParams,
    GetPromptParams,
]


# ============================================================================
# Messages
# ============================================================================

@dataclass(frozen=True)
class Request:
    """
    Decoded request

    Attributes:
        request_id: Correlation id
        kind: Request kind
        params: Typed params matching the kind
    """
    request_id: RequestId
    kind: RequestKind
    params: RequestParams

    @property
    def target(self) -> Optional[str]:
        """URI or name addressed by the request, if any"""
        if isinstance(self.params, ReadResourceParams):
            return self.params.uri
        if isinstance(self.params, (CallToolParams, GetPromptParams)):
            return self.params.name
        return None


@dataclass(frozen=True)
class Notification:
    """JSON-RPC notification (no id, never answered)"""
    method: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Response:
    """
    Outcome of exactly one request

    Either result (success) or error (failure) is set.
    """
    request_id: Optional[RequestId]
    result: Optional[Dict[str, Any]] = None
    error: Optional[MCPError] = None

    @classmethod
    def success(cls, request_id: RequestId, result: Dict[str, Any]) -> "Response":
        return cls(request_id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Optional[RequestId], error: MCPError) -> "Response":
        return cls(request_id=request_id, error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def to_jsonrpc(self) -> Dict[str, Any]:
        """
        Convert to JSON-RPC 2.0 format

        Returns:
            dict: JSON-RPC response (result or error)
        """
        message: Dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": self.request_id}
        if self.error is not None:
            message["error"] = self.error.to_error_dict()
        else:
            message["result"] = self.result if self.result is not None else {}
        return message


class RequestDecodeError(Exception):
    """Correlated decode failure: the frame had a usable id"""

    def __init__(self, request_id: RequestId, error: MCPError):
        self.request_id = request_id
        self.error = error
        super().__init__(error.message)


# ============================================================================
# Decoding
# ============================================================================

def decode_request(frame: Union[bytes, str, Dict[str, Any]]) -> Union[Request, Notification]:
    """
    Decode one posted frame

    Args:
        frame: Raw body (bytes/str) or an already parsed object

    Returns:
        Request or Notification

    Raises:
        MalformedRequestError: If the frame cannot be decoded at all
        RequestDecodeError: If the method or params are wrong (correlated)
    """
    if isinstance(frame, (bytes, bytearray, str)):
        try:
            data = json.loads(frame)
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedRequestError(f"Parse error: {e}")
    else:
        data = frame

    if not isinstance(data, dict):
        raise MalformedRequestError("Message must be a JSON object", INVALID_REQUEST)
    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise MalformedRequestError("Missing or unsupported 'jsonrpc' version", INVALID_REQUEST)

    method = data.get("method")
    if not isinstance(method, str) or not method:
        raise MalformedRequestError("Missing 'method' field", INVALID_REQUEST)

    params = data.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise MalformedRequestError("'params' must be an object", INVALID_REQUEST)

    if "id" not in data:
        return Notification(method=method, params=params)

    request_id = data["id"]
    if isinstance(request_id, bool) or not isinstance(request_id, (str, int)):
        raise MalformedRequestError("'id' must be a string or an integer", INVALID_REQUEST)

    try:
        kind = RequestKind(method)
    except ValueError:
        raise RequestDecodeError(request_id, MethodNotFoundError(method))

    try:
        typed = _PARAM_DECODERS[kind](params)
    except InvalidArgumentsError as e:
        raise RequestDecodeError(request_id, e)

    return Request(request_id=request_id, kind=kind, params=typed)


def _require_string(params: Dict[str, Any], name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidArgumentsError(f"'{name}' must be a non-empty string", field=name)
    return value


def _optional_object(params: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = params.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidArgumentsError(f"'{name}' must be an object", field=name)
    return value


def _decode_initialize(params: Dict[str, Any]) -> InitializeParams:
    version = params.get("protocolVersion")
    if version is not None and not isinstance(version, str):
        raise InvalidArgumentsError("'protocolVersion' must be a string", field="protocolVersion")
    return InitializeParams(
        protocol_version=version,
        client_info=_optional_object(params, "clientInfo"),
        capabilities=_optional_object(params, "capabilities"),
    )


def _decode_list(params: Dict[str, Any]) -> ListParams:
    cursor = params.get("cursor")
    if cursor is not None and not isinstance(cursor, str):
        raise InvalidArgumentsError("'cursor' must be a string", field="cursor")
    return ListParams(cursor=cursor)


_PARAM_DECODERS = {
    RequestKind.INITIALIZE: _decode_initialize,
    RequestKind.PING: lambda params: PingParams(),
    RequestKind.READ_RESOURCE: lambda params: ReadResourceParams(
        uri=_require_string(params, "uri")
    ),
    RequestKind.LIST_RESOURCES: _decode_list,
    RequestKind.LIST_RESOURCE_TEMPLATES: _decode_list,
    RequestKind.CALL_TOOL: lambda params: CallToolParams(
        name=_require_string(params, "name"),
        arguments=_optional_object(params, "arguments"),
    ),
    RequestKind.LIST_TOOLS: _decode_list,
    RequestKind.GET_PROMPT: lambda params: GetPromptParams(
        name=_require_string(params, "name"),
        arguments=_optional_object(params, "arguments"),
    ),
    RequestKind.LIST_PROMPTS: _decode_list,
}


def check_decoder_table(decoders: Dict[RequestKind, Any]) -> None:
    """
    Ensure every request kind has a params decoder

    Raises:
        RuntimeError: If a kind has no decoder
    """
    missing = set(RequestKind) - set(decoders)
    if missing:
        raise RuntimeError(f"No params decoder for request kinds: {sorted(k.value for k in missing)}")


check_decoder_table(_PARAM_DECODERS)
