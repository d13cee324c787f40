"""Resolve a tool by name, decode its arguments and run its handler."""

from __future__ import annotations

import logging
from typing import Any

from .arguments import decode_arguments
from .errors import ToolExecutionError, ToolValidationError
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatcher:
    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def execute(self, name: str, args: dict[str, Any] | None) -> Any:
        """Run tool ``name`` with the caller's raw argument bag.

        Raises ToolNotFoundError for an unknown name. Any failure after that,
        argument decoding included, is raised as ToolExecutionError with the
        original exception as its cause.
        """
        if name not in self._registry:
            logger.warning(
                "Tool not found tool=%s available_tools=%s", name, self._registry.names()
            )
        tool = self._registry.lookup(name)

        logger.debug("Executing tool tool=%s args_count=%s", name, len(args or {}))
        try:
            params = decode_arguments(tool.arguments, args)
            result = await tool.handler(params)
        except ToolValidationError as exc:
            logger.warning("Invalid arguments tool=%s fields=%s", name, list(exc.fields))
            raise ToolExecutionError(name, exc) from exc
        except Exception as exc:
            logger.error("Tool execution failed tool=%s error=%s", name, exc)
            raise ToolExecutionError(name, exc) from exc

        logger.debug("Tool executed successfully tool=%s", name)
        return result
