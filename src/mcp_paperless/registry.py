"""Tool registry: name -> description, input record and handler."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .errors import DuplicateToolError, ToolNotFoundError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class Tool:
    name: str
    description: str
    arguments: type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema


class ToolRegistry:
    """Tools keyed by name.

    Populated once at startup and then sealed; lookups after that are
    read-only and safe from any number of concurrent calls.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._sealed = False

    def register(self, tool: Tool) -> None:
        if self._sealed:
            raise RuntimeError(f"registry is sealed, cannot register {tool.name}")
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool %s", tool.name)

    def seal(self) -> None:
        self._sealed = True
        logger.info("Tool registration complete total_tools=%s", len(self._tools))

    @property
    def sealed(self) -> bool:
        return self._sealed

    def lookup(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def list(self) -> list[Tool]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())
