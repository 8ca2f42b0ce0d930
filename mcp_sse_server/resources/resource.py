"""
Resource Module - Descriptors for addressable content

Module: resources.resource
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - ResourceDescriptor for exact URIs and URI templates
  - Producer capability may be sync or async
  - Listable flag (templates are never listable)
  - MCP info for resources/list and resources/templates/list

ARCHITECTURE:
A ResourceDescriptor binds a URI (exact) or a URI template to a producer
capability:

    producer(uri: str, params: Dict[str, str]) -> str | bytes | Content | ...

The descriptor does not interpret what the producer returns; the
ExecutionManager normalizes it into protocol content.
"""

import inspect
from typing import Any, Callable, Dict, Optional, Tuple

from ..registry.uri_template import UriTemplate


class ResourceDescriptor:
    """
    Registered resource (exact URI or template)

    Attributes:
        name: Human-readable resource name
        template: Compiled URI pattern
        mime_type: Default MIME type applied to raw producer output
        description: Optional description shown to clients
        listable: Whether resources/list enumerates this resource
        timeout: Invocation deadline in seconds (None = server default)
    """

    def __init__(
        self,
        name: str,
        uri: str,
        producer: Callable,
        description: Optional[str] = None,
        mime_type: Optional[str] = None,
        listable: bool = True,
        timeout: Optional[float] = None,
    ):
        """
        Initialize resource descriptor

        Args:
            name: Resource name
            uri: Exact URI ("config://app") or template ("greeting://{name}")
            producer: Callable(uri, params), sync or async
            description: Optional description
            mime_type: Default MIME type
            listable: Listed by resources/list (forced False for templates)
            timeout: Invocation deadline

        Raises:
            ValueError: If the URI pattern is malformed
        """
        self._name = name
        self._template = UriTemplate.compile(uri)
        self._producer = producer
        self._description = description
        self._mime_type = mime_type
        self._listable = listable and self._template.is_exact
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._name

    @property
    def template(self) -> UriTemplate:
        return self._template

    @property
    def uri(self) -> str:
        """Registered URI or template pattern"""
        return self._template.pattern

    @property
    def scheme(self) -> str:
        return self._template.scheme

    @property
    def is_template(self) -> bool:
        return not self._template.is_exact

    @property
    def exact_key(self) -> Tuple[str, str]:
        """(scheme, path) key of an exact resource"""
        return self._template.scheme, self.uri.split("://", 1)[1]

    @property
    def mime_type(self) -> Optional[str]:
        return self._mime_type

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def listable(self) -> bool:
        return self._listable

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    async def read(self, uri: str, params: Dict[str, str]) -> Any:
        """
        Produce the content of a concrete URI

        Args:
            uri: Concrete URI being read
            params: Placeholder values bound by the template

        Returns:
            Raw producer output
        """
        result = self._producer(uri, params)
        if inspect.isawaitable(result):
            result = await result
        return result

    def get_info(self) -> Dict[str, Any]:
        """
        Get resource information for MCP exposure

        Returns:
            dict: {"uri"| "uriTemplate", "name", "description"?, "mimeType"?}
        """
        key = "uriTemplate" if self.is_template else "uri"
        info = {key: self.uri, "name": self._name}
        if self._description:
            info["description"] = self._description
        if self._mime_type:
            info["mimeType"] = self._mime_type
        return info

    def __repr__(self) -> str:
        return f"ResourceDescriptor({self._name}, {self.uri})"
