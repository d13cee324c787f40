"""Domain errors."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


class PaperlessError(RuntimeError):
    """Base class for failures talking to the Paperless-ngx API."""


@dataclass(slots=True, eq=False)
class PaperlessApiError(PaperlessError):
    """Raised when the Paperless API returns a non-success response."""

    status_code: int
    message: str
    method: str = ""
    url: str = ""
    details: Mapping[str, Any] | None = field(default=None)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code in (401, 403)

    def __str__(self) -> str:
        text = f"paperless API error (status {self.status_code}): {self.message}"
        if self.details:
            text = f"{text} - {dict(self.details)}"
        return text


class PaperlessTransportError(PaperlessError):
    """The request never produced a usable response (network, timeout, bad body)."""


class ToolError(Exception):
    """Base class for tool registration and dispatch failures."""


class ToolValidationError(ToolError, ValueError):
    """Tool arguments are missing, empty or of the wrong type."""

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class ToolNotFoundError(ToolError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"tool not found: {name}")
        self.name = name


class DuplicateToolError(ToolError):
    def __init__(self, name: str) -> None:
        super().__init__(f"tool already registered: {name}")
        self.name = name


class ToolExecutionError(ToolError):
    """A registered tool failed. The original exception is kept as ``cause``."""

    def __init__(self, tool: str, cause: BaseException) -> None:
        super().__init__(f"tool execution failed: {cause}")
        self.tool = tool
        self.cause = cause

    @property
    def status_code(self) -> int | None:
        if isinstance(self.cause, PaperlessApiError):
            return self.cause.status_code
        return None

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.cause, PaperlessApiError) and self.cause.is_not_found

    @property
    def is_unauthorized(self) -> bool:
        return isinstance(self.cause, PaperlessApiError) and self.cause.is_unauthorized

    @property
    def is_validation_error(self) -> bool:
        return isinstance(self.cause, ToolValidationError)
