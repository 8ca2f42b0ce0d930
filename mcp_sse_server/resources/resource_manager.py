"""
Resource Manager - Resource table of the capability registry

Module: resources.resource_manager
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Resource registry
  - Exact URIs keyed by (scheme, path)
  - Templates kept in registration order
  - Ambiguous templates rejected at registration
  - Resolution: exact match first, then first matching template

ARCHITECTURE:
ResourceManager resolves a concrete URI to a descriptor plus the
placeholder values extracted from it:

    1. exact (scheme, path) lookup
    2. first template (registration order) whose match() succeeds
    3. NotFoundError

An exact URI may coexist with a template that also matches it (the exact
registration wins). Two templates of one scheme that could match the same
concrete URI are rejected so that resolution never depends on luck.
"""

import logging
from typing import Dict, List, Tuple

from .resource import ResourceDescriptor
from ..core.errors import DuplicateNameError, NotFoundError
from ..registry.uri_template import split_uri


class ResourceManager:
    """
    Registry of resources

    Backed by ordered mappings so that removal can be added without
    reshaping the store.
    """

    def __init__(self):
        """Initialize resource manager"""
        self.logger = logging.getLogger("resources.manager")
        self._exact: Dict[Tuple[str, str], ResourceDescriptor] = {}
        self._templates: Dict[str, ResourceDescriptor] = {}

    def register(self, descriptor: ResourceDescriptor) -> None:
        """
        Register a resource

        Args:
            descriptor: Resource to register

        Raises:
            DuplicateNameError: If the URI is already registered or the
                template is ambiguous with an existing one
        """
        if descriptor.is_template:
            for existing in self._templates.values():
                if existing.template.overlaps(descriptor.template):
                    raise DuplicateNameError(
                        f"Resource template {descriptor.uri} is ambiguous "
                        f"with {existing.uri}"
                    )
            self._templates[descriptor.uri] = descriptor
        else:
            key = descriptor.exact_key
            if key in self._exact:
                raise DuplicateNameError(
                    f"Resource already registered: {descriptor.uri}"
                )
            self._exact[key] = descriptor

        self.logger.info(f"Resource registered: {descriptor.name} ({descriptor.uri})")

    def resolve(self, uri: str) -> Tuple[ResourceDescriptor, Dict[str, str]]:
        """
        Resolve a concrete URI

        Args:
            uri: Concrete URI

        Returns:
            (descriptor, params)

        Raises:
            NotFoundError: If nothing matches
        """
        parts = split_uri(uri)
        if parts is not None:
            exact = self._exact.get(parts)
            if exact is not None:
                return exact, {}

            for descriptor in self._templates.values():
                params = descriptor.template.match(uri)
                if params is not None:
                    return descriptor, params

        raise NotFoundError(f"Resource not found: {uri}")

    def list_listable(self) -> List[ResourceDescriptor]:
        """Exact resources flagged listable, in registration order"""
        return [d for d in self._exact.values() if d.listable]

    def list_templates(self) -> List[ResourceDescriptor]:
        """Template resources in registration order"""
        return list(self._templates.values())

    def count(self) -> int:
        return len(self._exact) + len(self._templates)
