"""Application pagination – pager state, state tokens and page windows."""
from mp_pager.application.pagination.fields import ComputedSort, Field, SortDirection, SortKey
from mp_pager.application.pagination.condition import Condition, Join, SearchCondition
from mp_pager.application.pagination.state import SEARCH_KEY, PagerState, StateSnapshot
from mp_pager.application.pagination.codec import StateCodec, TokenSealer
from mp_pager.application.pagination.window import PageDescriptor, PageWindowPlanner
from mp_pager.application.pagination.context import (
    InMemorySessionStore,
    PagerRequest,
    SessionStore,
    pager_fingerprint,
)
from mp_pager.application.pagination.source import DataSource
from mp_pager.application.pagination.pager import PageResult, Pager, SortHeader

__all__ = [
    "SEARCH_KEY",
    "ComputedSort",
    "Condition",
    "DataSource",
    "Field",
    "InMemorySessionStore",
    "Join",
    "PageDescriptor",
    "PageResult",
    "PageWindowPlanner",
    "Pager",
    "PagerRequest",
    "PagerState",
    "SearchCondition",
    "SessionStore",
    "SortDirection",
    "SortHeader",
    "SortKey",
    "StateCodec",
    "StateSnapshot",
    "TokenSealer",
    "pager_fingerprint",
]
