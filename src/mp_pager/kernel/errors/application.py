"""Application-layer errors – raised while running a pagination cycle."""

from __future__ import annotations

from typing import Any

from mp_pager.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class ForbiddenError(ApplicationError):
    """The caller asked for something the pager does not permit."""

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.permission = permission


class SortNotAllowedError(ForbiddenError):
    """The requested sort is neither computed nor in the sort permissions."""

    default_code = "sort_not_allowed"

    def __init__(self, sort: str, **kwargs: Any) -> None:
        super().__init__(
            f"Sorting not allowed for field {sort}",
            permission=sort,
            detail={"sort": sort},
            **kwargs,
        )
        self.sort = sort


__all__ = ["ApplicationError", "ForbiddenError", "SortNotAllowedError"]
