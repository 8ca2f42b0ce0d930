"""
Prompt Manager - Prompt table of the capability registry

Module: prompts.prompt_manager
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Name-keyed prompt registry in registration order
  - DuplicateNameError / NotFoundError contract shared with ToolManager
  - Decorator registration
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .prompt import Prompt, FunctionPrompt
from ..core.errors import DuplicateNameError, NotFoundError


class PromptManager:
    """Central registry for MCP prompts"""

    def __init__(self):
        self.logger = logging.getLogger("prompts.manager")
        self._prompts: Dict[str, Prompt] = {}

    def register(self, prompt: Prompt) -> None:
        """
        Register a prompt

        Raises:
            DuplicateNameError: If a prompt with the same name exists
        """
        if prompt.name in self._prompts:
            raise DuplicateNameError(f"Prompt already registered: {prompt.name}")

        self._prompts[prompt.name] = prompt
        self.logger.info(f"Prompt registered: {prompt.name}")

    def resolve(self, prompt_name: str) -> Prompt:
        """
        Resolve a prompt by exact name

        Raises:
            NotFoundError: If no prompt has this name
        """
        prompt = self._prompts.get(prompt_name)
        if prompt is None:
            raise NotFoundError(f"Prompt not found: {prompt_name}")
        return prompt

    def list_all(self) -> List[Prompt]:
        return list(self._prompts.values())

    def count(self) -> int:
        return len(self._prompts)

    def get_info_list(self) -> List[Dict[str, Any]]:
        return [prompt.get_info() for prompt in self._prompts.values()]

    def prompt(
        self,
        name: str,
        description: str = "",
        input_schema: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Decorator to register a prompt

        Usage:
            @prompt_manager.prompt(
                name="greet-user",
                input_schema={"name": {"type": "string"}},
            )
            def greet(ctx, params):
                return [("user", f"Say hello to {params['name']}")]
        """

        def decorator(func: Callable):
            self.register(
                FunctionPrompt(
                    name=name,
                    func=func,
                    description=description,
                    input_schema=input_schema,
                    timeout=timeout,
                )
            )
            return func

        return decorator
