"""Application – pagination use case and export (framework-agnostic)."""

from mp_pager.application.pagination import (
    Condition,
    Join,
    PageDescriptor,
    PageResult,
    PageWindowPlanner,
    Pager,
    PagerRequest,
    PagerState,
    StateCodec,
)

__all__ = [
    "Condition",
    "Join",
    "PageDescriptor",
    "PageResult",
    "PageWindowPlanner",
    "Pager",
    "PagerRequest",
    "PagerState",
    "StateCodec",
]
