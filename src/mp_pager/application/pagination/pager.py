"""Application pagination – Pager, the per-request pagination controller."""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping
from urllib.parse import urlencode

from mp_pager.application.export import ColumnDef, ExportFormat, ExportRequest, ExportService
from mp_pager.application.pagination.codec import StateCodec
from mp_pager.application.pagination.context import (
    PagerRequest,
    SessionStore,
    pager_fingerprint,
)
from mp_pager.application.pagination.fields import SortDirection, SortKey
from mp_pager.application.pagination.source import DataSource
from mp_pager.application.pagination.state import PagerState, StateSnapshot
from mp_pager.application.pagination.window import PageDescriptor, PageWindowPlanner
from mp_pager.config.settings import PagerSettings
from mp_pager.kernel.errors import SortNotAllowedError, StateDecodeError
from mp_pager.observability.logging import get_logger
from mp_pager.security.encryption import FernetTokenSealer


@dataclasses.dataclass(frozen=True)
class SortHeader:
    """Sort metadata for one column header.

    ``token`` sorts the listing by this column in ``next_direction``:
    the opposite of the current direction when the column is active,
    ascending otherwise.
    """

    field: SortKey
    sortable: bool
    active: bool
    direction: SortDirection | None
    next_direction: SortDirection
    token: str


@dataclasses.dataclass
class PageResult:
    """Outcome of one pagination cycle."""

    items: list[Any]
    item_count: int
    page: int
    page_size: int
    total_pages: int
    links: list[PageDescriptor]
    token: str

    @property
    def has_pager(self) -> bool:
        return bool(self.links)


def _read_attribute(item: Any, path: str) -> Any:
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
            if callable(value):
                value = value()
    return value


class Pager:
    """Drive one pagination cycle for a data source.

    Usage::

        pager = Pager(UserSource(), PagerRequest.from_query(path, query), session=store)
        pager.state.add_sort_permission("name")
        pager.state.add_condition("active", True)
        result = pager.page()

    State is resolved from the request token first, then from the sticky
    session slot (when enabled), else the caller's setup is used as-is.
    """

    def __init__(
        self,
        source: DataSource,
        request: PagerRequest | None = None,
        *,
        session: SessionStore | None = None,
        settings: PagerSettings | None = None,
        codec: StateCodec | None = None,
        planner: PageWindowPlanner | None = None,
    ) -> None:
        self._source = source
        self._request = request or PagerRequest()
        self._session = session
        self._settings = settings or PagerSettings()
        self._codec = codec or self._default_codec(self._settings)
        self._planner = planner or PageWindowPlanner()
        self.state = PagerState(
            getattr(source, "identity", None),  # type: ignore[arg-type]
            getattr(source, "table", None),  # type: ignore[arg-type]
            jump_to=self._settings.jump_to,
            on_clear=self._forget_sticky,
        )
        self._log = get_logger(__name__, pager=self.state.identity)
        self.result: PageResult | None = None

    @staticmethod
    def _default_codec(settings: PagerSettings) -> StateCodec:
        if settings.seal_key:
            return StateCodec(FernetTokenSealer([settings.seal_key]))
        return StateCodec()

    @classmethod
    def restore(cls, token: str, source: DataSource, **kwargs: Any) -> "Pager":
        """Rebuild a pager from a token produced for the same data source."""
        pager = cls(source, **kwargs)
        snapshot = pager._codec.decode(token)
        if snapshot.classname != pager.state.identity:
            raise StateDecodeError(
                f"Token belongs to pager {snapshot.classname!r}, not {pager.state.identity!r}"
            )
        pager.state.merge(snapshot, replace_conditions=True)
        return pager

    # ------------------------------------------------------------------
    # Sticky session
    # ------------------------------------------------------------------

    @property
    def sticky(self) -> bool:
        return self._settings.sticky_pager and self._session is not None

    @property
    def fingerprint(self) -> str:
        return pager_fingerprint(self.state.identity, self._request, self._settings)

    def _forget_sticky(self) -> None:
        if self.sticky:
            self._session.delete(self.fingerprint)  # type: ignore[union-attr]

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def _decode(self, token: str, origin: str) -> StateSnapshot | None:
        try:
            snapshot = self._codec.decode(token)
        except StateDecodeError as exc:
            self._log.warning("pager.token_rejected", origin=origin, reason=exc.message)
            return None
        if snapshot.classname != self.state.identity:
            self._log.warning("pager.token_rejected", origin=origin, reason="identity mismatch")
            return None
        return snapshot

    def _resolve_state(self) -> None:
        if self._request.method == "POST":
            return
        if self._request.token is not None:
            snapshot = self._decode(self._request.token, "request")
            if snapshot is not None:
                self.state.merge(snapshot, replace_conditions=True)
        elif self.sticky:
            stored = self._session.get(self.fingerprint)  # type: ignore[union-attr]
            if stored:
                snapshot = self._decode(stored, "session")
                if snapshot is not None:
                    self.state.merge(snapshot)

    def page(self, all: bool = False) -> PageResult:  # noqa: A002
        """Resolve state, fetch the current page and build the link window.

        With *all* every matching row is fetched in one call and no window
        is computed.  Data-source errors propagate unchanged.
        """
        state = self.state
        self._resolve_state()
        if self._request.page is not None:
            state.set_page(self._request.page)

        state.apply_default_sort()
        try:
            state.ensure_sort_permitted()
        except SortNotAllowedError:
            self._log.warning("pager.sort_rejected", sort=str(state.sort))
            raise

        state.all = all
        items = list(
            self._source.get_paged(
                state.sort, state.direction, state.page, state.conditions, state.all, state.joins
            )
        )
        item_count = self._source.count(state.conditions, state.joins)

        page_size = self._settings.items_per_page
        links = [] if all else self._build_links(item_count, page_size)
        token = self.create_token()
        if self.sticky:
            self._session.set(self.fingerprint, token)  # type: ignore[union-attr]

        self.result = PageResult(
            items=items,
            item_count=item_count,
            page=state.page,
            page_size=page_size,
            total_pages=self._planner.total_pages(item_count, page_size),
            links=links,
            token=token,
        )
        self._log.debug(
            "pager.paged",
            page=state.page,
            item_count=item_count,
            total_pages=self.result.total_pages,
            all=all,
        )
        return self.result

    def _build_links(self, item_count: int, page_size: int) -> list[PageDescriptor]:
        window = self._planner.plan(item_count, page_size, self.state.page, self.state.jump_to)
        return [
            dataclasses.replace(d, token=self.create_token(page=d.target)) if d.is_link else d
            for d in window
        ]

    # ------------------------------------------------------------------
    # Tokens & links
    # ------------------------------------------------------------------

    def create_token(
        self,
        *,
        page: int | None = None,
        sort: SortKey | None = None,
        direction: SortDirection | None = None,
    ) -> str:
        snapshot = self.state.snapshot()
        if page is not None:
            snapshot.page = page
        if sort is not None:
            snapshot.sort = sort
        if direction is not None:
            snapshot.direction = direction
        return self._codec.encode(snapshot)

    def url_for(self, token: str) -> str:
        """Current path and query string with the page dropped and *token* set."""
        settings = self._settings
        pairs = self._request.query_without(settings.page_param, settings.token_param)
        pairs += ((settings.token_param, token),)
        return f"{self._request.path}?{urlencode(pairs)}"

    def sort_header(self, field: str | SortKey) -> SortHeader:
        key = self.state.normalize_sort(field)
        active = self.state.sort == key
        next_direction = self.state.direction.toggled if active else SortDirection.ASC
        return SortHeader(
            field=key,
            sortable=key in self.state.sort_permissions,
            active=active,
            direction=self.state.direction if active else None,
            next_direction=next_direction,
            token=self.create_token(sort=key, direction=next_direction),
        )

    # ------------------------------------------------------------------
    # Aggregates & export
    # ------------------------------------------------------------------

    def sum(self, field: str) -> Any:
        return self._source.sum(
            self.state.expand_field_name(field), self.state.conditions, self.state.joins
        )

    def export(
        self,
        columns: Iterable[str | ColumnDef],
        *,
        format: ExportFormat = "csv",  # noqa: A002
        service: ExportService | None = None,
    ) -> bytes:
        """Export every matching row; each column also becomes sortable."""
        column_defs = [ColumnDef.of(c) for c in columns]
        for column in column_defs:
            self.state.add_sort_permission(column.key)

        result = self.page(all=True)
        rows = [
            {column.key: _read_attribute(item, column.key) for column in column_defs}
            for item in result.items
        ]
        request = ExportRequest(
            columns=column_defs,
            rows=rows,
            format=format,
            filename=self.state.identity.lower(),
        )
        return (service or ExportService()).export(request)


__all__ = ["PageResult", "Pager", "SortHeader"]
