"""FastAPI adapter – PagerRequest dependency."""
from typing import Any, Annotated

from mp_pager.application.pagination.context import PagerRequest
from mp_pager.config.settings import PagerSettings
from mp_pager.kernel.errors import ValidationError


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'mp-pager[fastapi]' to use the FastAPI adapter"
        ) from exc


def pager_request_dependency(settings: PagerSettings | None = None):  # noqa: ANN201
    """Return a dependency that reads the pager token and page from the request.

    A malformed page parameter is answered with ``400``.
    """
    _require_fastapi()
    from fastapi import HTTPException, Request  # type: ignore[import-untyped]

    resolved = settings or PagerSettings()

    async def pager_request(request: Request) -> PagerRequest:
        try:
            return PagerRequest.from_query(
                request.url.path,
                request.url.query,
                method=request.method,
                settings=resolved,
            )
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=exc.to_dict()) from exc

    return pager_request


def _make_pager_request_dep() -> Any:
    from fastapi import Depends  # type: ignore[import-untyped]

    return Annotated[PagerRequest, Depends(pager_request_dependency())]


FastAPIPagerRequestDep = _make_pager_request_dep()


__all__ = ["FastAPIPagerRequestDep", "pager_request_dependency"]
