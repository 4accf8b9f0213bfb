"""Testing fakes – in-memory doubles for pager ports."""
from mp_pager.testing.fakes.data_source import InMemoryDataSource
from mp_pager.application.pagination.context import InMemorySessionStore

__all__ = ["InMemoryDataSource", "InMemorySessionStore"]
