"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to, so the web layer can render
`{status, message, errors?}` bodies without knowing about individual services.
"""

from __future__ import annotations

from typing import Any


class CapazError(Exception):
    """Base class for expected, user-facing failures."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"status": "error", "message": self.message}


class ValidationError(CapazError):
    """Malformed or out-of-bounds input. Never silently corrected."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, path: str, message: str) -> ValidationError:
        return cls(errors=[{"path": path, "message": message}])

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthenticationError(CapazError):
    """Missing, invalid or expired identity. Reported uniformly."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(CapazError):
    """Valid identity with insufficient role."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(CapazError):
    """Entity does not exist or lies outside the caller's visibility scope."""

    status_code = 404
    default_message = "Not found"


class ConflictError(CapazError):
    """Concurrent write lost a race on a uniqueness invariant; retry."""

    status_code = 409
    default_message = "Conflicting concurrent update, please retry"


def format_error_path(loc: tuple[Any, ...] | list[Any]) -> str:
    """Render a pydantic error location as ``responses[0].level``.

    A leading ``body``/``query``/``path`` segment is dropped.
    """
    parts = list(loc)
    if parts and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]

    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def errors_from_pydantic(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Convert pydantic ``exc.errors()`` into ``[{path, message}]`` entries."""
    return [
        {"path": format_error_path(error.get("loc", ())), "message": error.get("msg", "Invalid value")}
        for error in errors
    ]
