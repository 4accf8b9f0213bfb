"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from mp_pager.adapters.fastapi.deps import _require_fastapi
from mp_pager.config.validation import ConfigError
from mp_pager.kernel.errors import (
    BaseError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    ValidationError,
)


class FastAPIExceptionMapper:
    """Register pager error → HTTP status-code mappings on a FastAPI app.

    Mappings
    --------
    ``ValidationError``     → 400
    ``ForbiddenError``      → 403 (includes ``SortNotAllowedError``)
    ``DomainError``         → 422
    ``InfrastructureError`` → 503
    ``ConfigError``         → 500
    """

    def __init__(self) -> None:
        _require_fastapi()
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (ForbiddenError, 403),
            (DomainError, 422),
            (InfrastructureError, 503),
            (ConfigError, 500),
        ]

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        from fastapi.responses import JSONResponse  # type: ignore[import-untyped]

        def make_handler(code: int) -> Callable[[Any, Any], Any]:
            def handler(request: Any, exc: Any) -> Any:  # noqa: ARG001
                if isinstance(exc, BaseError):
                    body = exc.to_dict()
                else:
                    body = {"code": "error", "message": str(exc)}
                return JSONResponse(status_code=code, content=body)

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["FastAPIExceptionMapper"]
