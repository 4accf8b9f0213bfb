"""Application pagination – PagerRequest, SessionStore, pager fingerprints."""
from __future__ import annotations

import dataclasses
import hashlib
import json
import re
from typing import Mapping, Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode

from mp_pager.config.settings import PagerSettings
from mp_pager.kernel.errors import ValidationError

QueryPairs = tuple[tuple[str, str], ...]

_INDEX_SEGMENT = re.compile(r"/index(?=/|$)")


@dataclasses.dataclass(frozen=True)
class PagerRequest:
    """What the pager needs to know about the incoming HTTP request.

    ``query`` keeps every query-string pair in order; ``token`` and ``page``
    are the values already extracted from it.
    """

    path: str = "/"
    query: QueryPairs = ()
    token: str | None = None
    page: int | None = None
    method: str = "GET"

    def __post_init__(self) -> None:
        if self.page is not None and (isinstance(self.page, bool) or not isinstance(self.page, int)):
            raise ValidationError(
                f"Page must be an integer, got {type(self.page).__name__}",
                errors=[{"field": "page", "value": self.page}],
            )
        if self.page is not None and self.page < 1:
            raise ValidationError("page must be >= 1", errors=[{"field": "page", "value": self.page}])

    @classmethod
    def from_query(
        cls,
        path: str,
        query: str | Mapping[str, str] = "",
        *,
        method: str = "GET",
        settings: PagerSettings | None = None,
    ) -> "PagerRequest":
        """Build a request from a raw query string or a flat mapping."""
        settings = settings or PagerSettings()
        if isinstance(query, str):
            pairs = tuple(parse_qsl(query, keep_blank_values=True))
        else:
            pairs = tuple((str(k), str(v)) for k, v in query.items())
        params = dict(pairs)

        token = params.get(settings.token_param) or None
        page: int | None = None
        raw_page = params.get(settings.page_param)
        if raw_page:
            try:
                page = int(raw_page)
            except ValueError:
                raise ValidationError(
                    f"Invalid page number {raw_page!r}",
                    errors=[{"field": settings.page_param, "value": raw_page}],
                ) from None
        return cls(path=path, query=pairs, token=token, page=page, method=method.upper())

    def query_without(self, *names: str) -> QueryPairs:
        return tuple((k, v) for k, v in self.query if k not in names)


@runtime_checkable
class SessionStore(Protocol):
    """Port: server-side slot holding sticky pager tokens."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, token: str) -> None: ...
    def delete(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dict-backed session store, e.g. one per user session in tests."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, token: str) -> None:
        self._data[key] = token

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


def normalize_path(path: str) -> str:
    """Strip the query string and ``/index`` segments from *path*."""
    path = path.split("?", 1)[0]
    path = _INDEX_SEGMENT.sub("", path)
    return path or "/"


def pager_fingerprint(identity: str, request: PagerRequest, settings: PagerSettings) -> str:
    """Deterministic session key for one pager on one listing view.

    The page and token parameters are ignored, so paging through a view
    keeps hitting the same slot.
    """
    remaining = sorted(request.query_without(settings.page_param, settings.token_param))
    canonical = json.dumps(
        [identity.lower(), normalize_path(request.path), urlencode(remaining)],
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical.encode()).hexdigest()[:32]
    return f"{settings.session_namespace}:{identity.lower()}:{digest}"


__all__ = [
    "InMemorySessionStore",
    "PagerRequest",
    "QueryPairs",
    "SessionStore",
    "normalize_path",
    "pager_fingerprint",
]
