"""
Content Model - Payloads produced by resources, tools and prompts

Module: protocol.content
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Text and base64 blob content with MIME type
  - Resource references for prompt messages
  - Role-tagged prompt messages
  - Normalization of plain producer return values

ARCHITECTURE:
Capabilities return whatever is natural for them (str, bytes, dict, a
content object, or a list of those). normalize_contents() converts the
return value into a list of content objects; the to_*_dict() methods render
the MCP wire format for resources/read, tools/call and prompts/get.
"""

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

DEFAULT_TEXT_MIME = "text/plain"
DEFAULT_BLOB_MIME = "application/octet-stream"
JSON_MIME = "application/json"

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
VALID_ROLES = (ROLE_USER, ROLE_ASSISTANT)


@dataclass(frozen=True)
class TextContent:
    """Plain text with a MIME type"""
    text: str
    mime_type: Optional[str] = None

    def to_resource_dict(self, uri: str) -> Dict[str, Any]:
        """Render as a resources/read content entry"""
        entry = {"uri": uri, "text": self.text}
        if self.mime_type:
            entry["mimeType"] = self.mime_type
        return entry

    def to_content_dict(self) -> Dict[str, Any]:
        """Render as a tool / prompt content block"""
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class BlobContent:
    """Binary payload, transported base64-encoded"""
    data: bytes
    mime_type: str = DEFAULT_BLOB_MIME

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_resource_dict(self, uri: str) -> Dict[str, Any]:
        """Render as a resources/read content entry"""
        return {"uri": uri, "mimeType": self.mime_type, "blob": self.base64}

    def to_content_dict(self) -> Dict[str, Any]:
        """Render as a tool / prompt content block"""
        kind = "image" if self.mime_type.startswith("image/") else "blob"
        return {"type": kind, "data": self.base64, "mimeType": self.mime_type}


@dataclass(frozen=True)
class ResourceReference:
    """Pointer to another resource, resolved lazily by the client"""
    uri: str
    name: Optional[str] = None
    mime_type: Optional[str] = None

    def to_content_dict(self) -> Dict[str, Any]:
        block = {"type": "resource_link", "uri": self.uri}
        block["name"] = self.name or self.uri
        if self.mime_type:
            block["mimeType"] = self.mime_type
        return block


Content = Union[TextContent, BlobContent, ResourceReference]


@dataclass(frozen=True)
class PromptMessage:
    """One role-tagged message of a prompt"""
    role: str
    content: Content

    def __post_init__(self):
        if self.role not in VALID_ROLES:
            raise ValueError(f"Invalid message role: {self.role!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content.to_content_dict()}


def to_content(value: Any, mime_type: Optional[str] = None) -> Content:
    """
    Convert a single producer value into a content object

    Args:
        value: str, bytes, dict/list, or a content object
        mime_type: MIME type to apply to raw values

    Returns:
        Content: Normalized content

    Raises:
        TypeError: If the value cannot be represented
    """
    if isinstance(value, (TextContent, BlobContent, ResourceReference)):
        return value
    if isinstance(value, str):
        return TextContent(value, mime_type)
    if isinstance(value, (bytes, bytearray)):
        return BlobContent(bytes(value), mime_type or DEFAULT_BLOB_MIME)
    if isinstance(value, (dict, list, int, float, bool)):
        return TextContent(json.dumps(value), mime_type or JSON_MIME)
    raise TypeError(f"Unsupported content type: {type(value).__name__}")


def normalize_contents(value: Any, mime_type: Optional[str] = None) -> List[Content]:
    """
    Convert a producer return value into a list of content objects

    A list or tuple of content objects / str / bytes is flattened one level;
    any other value is a single content item.
    """
    if isinstance(value, (list, tuple)) and value and all(
        isinstance(item, (TextContent, BlobContent, ResourceReference, str, bytes))
        for item in value
    ):
        return [to_content(item, mime_type) for item in value]
    return [to_content(value, mime_type)]


def normalize_messages(value: Any) -> List[PromptMessage]:
    """
    Convert a prompt producer return value into prompt messages

    Accepts PromptMessage objects, (role, content) tuples or
    {"role": ..., "content": ...} dicts whose content is a str or a
    content object.

    Raises:
        TypeError: If an item cannot be interpreted as a message
    """
    if isinstance(value, (PromptMessage, dict)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise TypeError("Prompt must return a list of messages")

    messages = []
    for item in value:
        if isinstance(item, PromptMessage):
            messages.append(item)
        elif isinstance(item, dict) and "role" in item and "content" in item:
            messages.append(PromptMessage(item["role"], to_content(item["content"])))
        elif isinstance(item, tuple) and len(item) == 2:
            messages.append(PromptMessage(item[0], to_content(item[1])))
        else:
            raise TypeError(f"Invalid prompt message: {item!r}")
    return messages
