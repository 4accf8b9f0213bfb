"""Unit tests for Pager – the pagination cycle."""
from __future__ import annotations

import base64
import csv
import io
import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from mp_pager.application.pagination import (
    ComputedSort,
    Condition,
    Field,
    InMemorySessionStore,
    Pager,
    PagerRequest,
    SortDirection,
    StateCodec,
    StateSnapshot,
)
from mp_pager.config.settings import PagerSettings
from mp_pager.config.validation import PagerConfigurationError
from mp_pager.kernel.errors import SortNotAllowedError, StateDecodeError
from mp_pager.testing.fakes import InMemoryDataSource


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _users(n: int = 205) -> list[dict[str, Any]]:
    return [
        {"id": i, "name": f"user{i:03d}", "age": 20 + i % 50, "team": "red" if i % 2 else "blue"}
        for i in range(1, n + 1)
    ]


def _source(n: int = 205) -> InMemoryDataSource:
    return InMemoryDataSource(
        "User", "user", _users(n), items_per_page=20,
        computed_sorts={"name_length": lambda row: len(row["name"])},
    )


def _pager(source: InMemoryDataSource | None = None, request: PagerRequest | None = None, **kwargs: Any) -> Pager:
    pager = Pager(source or _source(), request, **kwargs)
    pager.state.add_sort_permission("name")
    pager.state.add_sort_permission("age")
    return pager


_STICKY = PagerSettings(sticky_pager=True)


# ---------------------------------------------------------------------------
# construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_identity_required(self) -> None:
        source = InMemoryDataSource("", "user")
        with pytest.raises(PagerConfigurationError):
            Pager(source)

    def test_source_without_identity_attribute(self) -> None:
        with pytest.raises(PagerConfigurationError):
            Pager(object())  # type: ignore[arg-type]

    def test_jump_to_follows_settings(self) -> None:
        pager = Pager(_source(), settings=PagerSettings(jump_to=False))
        assert pager.state.jump_to is False


# ---------------------------------------------------------------------------
# cycle
# ---------------------------------------------------------------------------

class TestPageCycle:
    def test_defaults_to_first_permission(self) -> None:
        pager = _pager()
        result = pager.page()
        assert pager.state.sort == Field("user.name")
        assert [r["name"] for r in result.items[:2]] == ["user001", "user002"]

    def test_counts_and_window(self) -> None:
        result = _pager().page()
        assert result.item_count == 205
        assert result.total_pages == 11
        assert result.page == 1
        assert result.page_size == 20
        assert len(result.items) == 20
        assert result.has_pager

    def test_page_override_from_request(self) -> None:
        result = _pager(request=PagerRequest(page=6)).page()
        numbers = [d.number for d in result.links if d.kind == "page"]
        assert numbers == [1, 2, 4, 5, 6, 7, 8, 10, 11]
        assert result.items[0]["id"] == 101

    def test_links_carry_tokens_for_their_target(self) -> None:
        pager = _pager(request=PagerRequest(page=6))
        result = pager.page()
        codec = StateCodec()
        for descriptor in result.links:
            if descriptor.is_link:
                assert codec.decode(descriptor.token).page == descriptor.target
            else:
                assert descriptor.token is None

    def test_result_token_encodes_current_state(self) -> None:
        pager = _pager(request=PagerRequest(page=3))
        pager.state.add_condition("team", "red")
        result = pager.page()
        snapshot = StateCodec().decode(result.token)
        assert snapshot.page == 3
        assert snapshot.classname == "User"
        assert snapshot.conditions == {"user.team": [Condition.of("user.team", "red")]}

    def test_conditions_filter_rows(self) -> None:
        pager = _pager()
        pager.state.add_condition("team", "blue")
        result = pager.page()
        assert result.item_count == 102
        assert all(r["team"] == "blue" for r in result.items)

    def test_single_page_has_no_links(self) -> None:
        result = _pager(_source(15)).page()
        assert result.links == []
        assert not result.has_pager

    def test_jump_to_in_window(self) -> None:
        result = _pager().page()
        kinds = [d.kind for d in result.links]
        assert kinds[-2:] == ["next", "jump_to"]

    def test_sort_direction_desc(self) -> None:
        pager = _pager()
        pager.state.set_direction("desc")
        assert pager.page().items[0]["name"] == "user205"

    def test_computed_sort_needs_no_permission(self) -> None:
        pager = _pager()
        pager.state.set_sort(ComputedSort("name_length"))
        pager.page()
        assert pager.state.sort == ComputedSort("name_length")

    def test_data_source_receives_state(self) -> None:
        source = _source()
        pager = _pager(source)
        pager.state.add_join("team", "id", "team_id")
        pager.page()
        name, call = source.calls[0]
        assert name == "get_paged"
        assert call["sort"] == Field("user.name")
        assert call["direction"] is SortDirection.ASC
        assert call["page"] == 1
        assert call["all"] is False
        assert call["joins"][0].local_field == "user.team_id"


class TestPermissions:
    def test_unpermitted_sort_fails_before_any_fetch(self) -> None:
        source = MagicMock()
        source.identity = "User"
        source.table = "user"
        pager = Pager(source)
        pager.state.add_sort_permission("name")
        pager.state.set_sort("email")
        with pytest.raises(SortNotAllowedError):
            pager.page()
        source.get_paged.assert_not_called()
        source.count.assert_not_called()

    def test_forged_token_sort_rejected(self) -> None:
        forged = StateCodec().encode(StateSnapshot(classname="User", sort=Field("user.password")))
        pager = _pager(request=PagerRequest(token=forged))
        with pytest.raises(SortNotAllowedError):
            pager.page()

    def test_no_permissions_and_no_sort(self) -> None:
        pager = Pager(_source())
        result = pager.page()
        assert pager.state.sort is None
        assert result.item_count == 205


class TestDataSourceErrors:
    def test_errors_propagate_unchanged(self) -> None:
        source = MagicMock()
        source.identity = "User"
        source.table = "user"
        boom = RuntimeError("db down")
        source.get_paged.side_effect = boom
        with pytest.raises(RuntimeError) as info:
            Pager(source).page()
        assert info.value is boom

    def test_no_session_write_on_failure(self) -> None:
        source = MagicMock()
        source.identity = "User"
        source.table = "user"
        source.count.side_effect = RuntimeError("db down")
        store = InMemorySessionStore()
        with pytest.raises(RuntimeError):
            Pager(source, session=store, settings=_STICKY).page()
        assert len(store) == 0


# ---------------------------------------------------------------------------
# state resolution
# ---------------------------------------------------------------------------

class TestTokenResolution:
    def test_request_token_restores_state(self) -> None:
        first = _pager()
        first.state.add_condition("team", "red")
        first.state.set_sort("age")
        first.state.set_direction("desc")
        token = first.page().links[-2].token  # "next" link → page 2

        second = _pager(request=PagerRequest(token=token))
        result = second.page()
        assert second.state.page == 2
        assert second.state.sort == Field("user.age")
        assert second.state.direction is SortDirection.DESC
        assert result.item_count == 103

    def test_request_token_discards_configured_conditions(self) -> None:
        token = StateCodec().encode(StateSnapshot(classname="User", page=2))
        pager = _pager(request=PagerRequest(token=token))
        pager.state.add_condition("team", "red")
        pager.page()
        assert pager.state.conditions == {}

    def test_page_parameter_wins_over_token(self) -> None:
        token = StateCodec().encode(StateSnapshot(classname="User", page=2))
        pager = _pager(request=PagerRequest(token=token, page=5))
        assert pager.page().page == 5

    def test_bad_token_falls_back_to_defaults(self) -> None:
        pager = _pager(request=PagerRequest(token="garbage!"))
        pager.state.add_condition("team", "red")
        result = pager.page()
        assert result.item_count == 103
        assert result.page == 1

    @pytest.mark.parametrize(
        "document",
        [
            '{"v":1,"c":"User","f":{"user.age":[{"f":"user.age","o":">","v":NaN}]},"p":2,"s":null,"d":"asc","j":[]}',
            '{"v":1,"c":"User","f":{"user.age":[{"f":"user.age","o":">","v":1e400}]},"p":2,"s":null,"d":"asc","j":[]}',
            "[" * 5000 + "]" * 5000,
        ],
        ids=["nan", "overflow", "deep-nesting"],
    )
    def test_hostile_token_falls_back_to_defaults(self, document: str) -> None:
        token = base64.urlsafe_b64encode(document.encode()).rstrip(b"=").decode()
        result = _pager(request=PagerRequest(token=token)).page()
        assert result.page == 1
        assert result.item_count == 205
        assert result.token

    def test_token_for_other_pager_ignored(self) -> None:
        token = StateCodec().encode(StateSnapshot(classname="Invoice", page=4))
        result = _pager(request=PagerRequest(token=token)).page()
        assert result.page == 1

    def test_post_requests_ignore_token(self) -> None:
        token = StateCodec().encode(StateSnapshot(classname="User", page=4))
        result = _pager(request=PagerRequest(token=token, method="POST")).page()
        assert result.page == 1

    def test_sealed_tokens(self) -> None:
        from mp_pager.security.encryption import FernetTokenSealer

        settings = PagerSettings(seal_key=FernetTokenSealer.generate_key().decode())
        token = _pager(request=PagerRequest(page=3), settings=settings).page().token
        assert _pager(request=PagerRequest(token=token), settings=settings).page().page == 3
        # a plain codec cannot read it and the pager falls back
        assert _pager(request=PagerRequest(token=token)).page().page == 1


class TestStickySession:
    def _request(self, **kwargs: Any) -> PagerRequest:
        return PagerRequest(path="/users", query=(("view", "all"),), **kwargs)

    def test_token_written_to_session(self) -> None:
        store = InMemorySessionStore()
        pager = _pager(request=self._request(page=3), session=store, settings=_STICKY)
        result = pager.page()
        assert store.get(pager.fingerprint) == result.token

    def test_session_restores_state(self) -> None:
        store = InMemorySessionStore()
        first = _pager(request=self._request(page=3), session=store, settings=_STICKY)
        first.state.add_condition("team", "red")
        first.page()

        second = _pager(request=self._request(), session=store, settings=_STICKY)
        result = second.page()
        assert result.page == 3
        assert result.item_count == 103

    def test_session_merges_into_configured_conditions(self) -> None:
        store = InMemorySessionStore()
        first = _pager(request=self._request(), session=store, settings=_STICKY)
        first.state.add_condition("team", "red")
        first.page()

        second = _pager(request=self._request(), session=store, settings=_STICKY)
        second.state.add_condition("age", ">", 30)
        second.page()
        assert set(second.state.conditions) == {"user.team", "user.age"}

    def test_sticky_disabled_by_default(self) -> None:
        store = InMemorySessionStore()
        _pager(request=self._request(page=3), session=store).page()
        assert len(store) == 0

    def test_request_token_beats_session(self) -> None:
        store = InMemorySessionStore()
        _pager(request=self._request(page=3), session=store, settings=_STICKY).page()
        token = StateCodec().encode(StateSnapshot(classname="User", page=7))
        result = _pager(request=self._request(token=token), session=store, settings=_STICKY).page()
        assert result.page == 7

    def test_clear_conditions_drops_session_entry(self) -> None:
        store = InMemorySessionStore()
        pager = _pager(request=self._request(), session=store, settings=_STICKY)
        pager.page()
        assert pager.fingerprint in store
        pager.state.clear_conditions()
        assert pager.fingerprint not in store

    def test_corrupt_session_entry_ignored(self) -> None:
        store = InMemorySessionStore()
        pager = _pager(request=self._request(), session=store, settings=_STICKY)
        store.set(pager.fingerprint, "corrupt")
        assert pager.page().page == 1


# ---------------------------------------------------------------------------
# headers, links, aggregates, export
# ---------------------------------------------------------------------------

class TestSortHeader:
    def test_active_column_toggles(self) -> None:
        pager = _pager()
        pager.page()
        header = pager.sort_header("name")
        assert header.active
        assert header.sortable
        assert header.direction is SortDirection.ASC
        assert header.next_direction is SortDirection.DESC
        snapshot = StateCodec().decode(header.token)
        assert snapshot.sort == Field("user.name")
        assert snapshot.direction is SortDirection.DESC

    def test_inactive_column_sorts_ascending(self) -> None:
        pager = _pager()
        pager.state.set_direction("desc")
        pager.page()
        header = pager.sort_header("age")
        assert not header.active
        assert header.direction is None
        assert header.next_direction is SortDirection.ASC

    def test_unpermitted_column_not_sortable(self) -> None:
        pager = _pager()
        assert not pager.sort_header("email").sortable


class TestUrlFor:
    def test_replaces_token_and_drops_page(self) -> None:
        request = PagerRequest.from_query("/users", "view=all&p=3&q=old")
        pager = _pager(request=request)
        assert pager.url_for("abc") == "/users?view=all&q=abc"


class TestSum:
    def test_sum_uses_current_conditions(self) -> None:
        source = InMemoryDataSource("Order", "order", [
            {"total": 10, "paid": True}, {"total": 5, "paid": False}, {"total": 7, "paid": True},
        ])
        pager = Pager(source)
        pager.state.add_condition("paid", True)
        assert pager.sum("total") == 17
        assert source.calls[-1] == ("sum", {"field": "order.total", "joins": []})

    def test_qualified_field_passes_through(self) -> None:
        source = InMemoryDataSource("Order", "order", [{"total": 3}])
        Pager(source).sum("order.total")
        assert source.calls[-1][1]["field"] == "order.total"


class TestExport:
    def test_csv_contains_every_row(self) -> None:
        pager = Pager(_source(45))
        data = pager.export(["id", "name"])
        rows = list(csv.reader(io.StringIO(data.decode("utf-8")), delimiter=";"))
        assert rows[0] == ["id", "name"]
        assert len(rows) == 46
        assert rows[1] == ["1", "user001"]

    def test_export_columns_become_sortable(self) -> None:
        pager = Pager(_source(5))
        pager.export(["name", "age"])
        assert pager.state.sort_permissions == [Field("user.name"), Field("user.age")]
        assert pager.state.sort == Field("user.name")

    def test_export_skips_window(self) -> None:
        pager = Pager(_source(45))
        pager.export(["id"])
        assert pager.result is not None
        assert pager.result.links == []
        assert len(pager.result.items) == 45

    def test_json_export(self) -> None:
        data = Pager(_source(2)).export(["id", "name"], format="json")
        assert json.loads(data) == [{"id": 1, "name": "user001"}, {"id": 2, "name": "user002"}]
