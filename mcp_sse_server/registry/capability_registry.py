"""
Capability Registry - Resources, tools and prompts behind one facade

Module: registry.capability_registry
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Three independent tables (ResourceManager, ToolManager, PromptManager)
  - Registration, resolution and listing per table
  - Registry frozen when the server starts

ARCHITECTURE:
CapabilityRegistry owns the three managers and is the only object the
protocol handler consults. Registration happens once at startup; after
freeze() the registry is read-only and is shared by all sessions without
synchronization.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..prompts.prompt import Prompt
from ..prompts.prompt_manager import PromptManager
from ..resources.resource import ResourceDescriptor
from ..resources.resource_manager import ResourceManager
from ..tools.tool import Tool
from ..tools.tool_manager import ToolManager


class CapabilityRegistry:
    """
    Registry of every capability exposed by the server

    Typical usage:
        registry = CapabilityRegistry()
        registry.register_tool(FunctionTool("add", "Add numbers", add, {...}))
        registry.freeze()
        tool = registry.resolve_tool("add")
    """

    def __init__(self):
        """Initialize empty registry"""
        self.logger = logging.getLogger("registry.capabilities")

        self.resources = ResourceManager()
        self.tools = ToolManager()
        self.prompts = PromptManager()

        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the registry read-only"""
        if not self._frozen:
            self._frozen = True
            self.logger.info(
                f"Registry frozen: {self.resources.count()} resources, "
                f"{self.tools.count()} tools, {self.prompts.count()} prompts"
            )

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Capability registry is read-only once the server runs")

    # ========================================================================
    # Registration
    # ========================================================================

    def register_resource(self, descriptor: ResourceDescriptor) -> None:
        """
        Register a resource

        Raises:
            DuplicateNameError: If the URI is taken or the template is ambiguous
            RuntimeError: If the registry is frozen
        """
        self._check_mutable()
        self.resources.register(descriptor)

    def register_tool(self, tool: Tool) -> None:
        """
        Register a tool

        Raises:
            DuplicateNameError: If the name is taken
            RuntimeError: If the registry is frozen
        """
        self._check_mutable()
        self.tools.register(tool)

    def register_prompt(self, prompt: Prompt) -> None:
        """
        Register a prompt

        Raises:
            DuplicateNameError: If the name is taken
            RuntimeError: If the registry is frozen
        """
        self._check_mutable()
        self.prompts.register(prompt)

    def resource(
        self,
        name: str,
        uri: str,
        description: Optional[str] = None,
        mime_type: Optional[str] = None,
        listable: bool = True,
        timeout: Optional[float] = None,
    ):
        """
        Decorator to register a resource producer

        Usage:
            @registry.resource("greeting", "greeting://{name}")
            def greeting(uri, params):
                return f"Hello, {params['name']}!"
        """

        def decorator(func: Callable):
            self.register_resource(
                ResourceDescriptor(
                    name=name,
                    uri=uri,
                    producer=func,
                    description=description,
                    mime_type=mime_type,
                    listable=listable,
                    timeout=timeout,
                )
            )
            return func

        return decorator

    def tool(
        self,
        name: str,
        description: str,
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        """Decorator to register a tool (see ToolManager.tool)"""

        def decorator(func: Callable):
            self._check_mutable()
            return self.tools.tool(name, description, input_schema, timeout)(func)

        return decorator

    def prompt(
        self,
        name: str,
        description: str = "",
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        """Decorator to register a prompt (see PromptManager.prompt)"""

        def decorator(func: Callable):
            self._check_mutable()
            return self.prompts.prompt(name, description, input_schema, timeout)(func)

        return decorator

    # ========================================================================
    # Resolution
    # ========================================================================

    def resolve_resource(self, uri: str) -> Tuple[ResourceDescriptor, Dict[str, str]]:
        """Resolve a URI (exact first, then templates in order)"""
        return self.resources.resolve(uri)

    def resolve_tool(self, name: str) -> Tool:
        """Exact-name tool lookup"""
        return self.tools.resolve(name)

    def resolve_prompt(self, name: str) -> Prompt:
        """Exact-name prompt lookup"""
        return self.prompts.resolve(name)

    # ========================================================================
    # Listing
    # ========================================================================

    def list_resources(self) -> List[ResourceDescriptor]:
        """Listable exact resources in registration order"""
        return self.resources.list_listable()

    def list_resource_templates(self) -> List[ResourceDescriptor]:
        return self.resources.list_templates()

    def list_tools(self) -> List[Tool]:
        return self.tools.list_all()

    def list_prompts(self) -> List[Prompt]:
        return self.prompts.list_all()

    def get_summary(self) -> Dict[str, Any]:
        """Counts per table, used by the info endpoint and logs"""
        return {
            "resources": self.resources.count(),
            "tools": self.tools.count(),
            "prompts": self.prompts.count(),
        }
