"""Application pagination – StateCodec.

A state token is a compact JSON document::

    {"v": 1, "c": "User", "f": {...}, "p": 3, "s": {"k": "field", "n": "user.name"},
     "d": "asc", "j": [...]}

encoded as URL-safe base64 without padding, so it can be dropped into a
query string untouched.  With a :class:`TokenSealer` the JSON is encrypted
and authenticated instead, which makes tokens tamper-evident.
"""
from __future__ import annotations

import base64
import binascii
import json
import math
from typing import Any, Protocol

from mp_pager.application.pagination.condition import Condition, Join, SearchCondition
from mp_pager.application.pagination.fields import ComputedSort, Field, SortDirection, SortKey
from mp_pager.application.pagination.state import SEARCH_KEY, ConditionEntry, StateSnapshot
from mp_pager.config.validation import PagerConfigurationError
from mp_pager.kernel.errors import StateDecodeError, StateEncodeError, ValidationError

TOKEN_VERSION = 1


class TokenSealer(Protocol):
    """Turns payload bytes into a URL-safe string and back."""

    def seal(self, payload: bytes) -> str: ...
    def unseal(self, token: str) -> bytes: ...


def _b64encode(payload: bytes) -> str:
    return base64.urlsafe_b64encode(payload).rstrip(b"=").decode("ascii")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} in state token")


def _b64decode(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


class StateCodec:
    """Encode a :class:`StateSnapshot` into an opaque token and back.

    ``decode(encode(s)) == s`` holds for every snapshot whose condition
    values are JSON scalars.
    """

    def __init__(self, sealer: TokenSealer | None = None) -> None:
        self._sealer = sealer

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self, snapshot: StateSnapshot) -> str:
        document = {
            "v": TOKEN_VERSION,
            "c": snapshot.classname,
            "f": {key: self._dump_entry(entry) for key, entry in snapshot.conditions.items()},
            "p": snapshot.page,
            "s": self._dump_sort(snapshot.sort),
            "d": SortDirection(snapshot.direction).value,
            "j": [self._dump_join(join) for join in snapshot.joins],
        }
        try:
            payload = json.dumps(
                document, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StateEncodeError(f"Pager state is not serialisable: {exc}", cause=exc) from exc
        if self._sealer is not None:
            return self._sealer.seal(payload)
        return _b64encode(payload)

    @staticmethod
    def _dump_condition(condition: Condition) -> dict[str, Any]:
        value = list(condition.value) if condition.is_multi else condition.value
        return {"f": condition.field, "o": condition.operator, "v": value}

    def _dump_entry(self, entry: ConditionEntry) -> Any:
        if isinstance(entry, SearchCondition):
            return {"q": entry.query, "fs": list(entry.fields)}
        return [self._dump_condition(c) for c in entry]

    @staticmethod
    def _dump_sort(sort: SortKey | None) -> dict[str, str] | None:
        if sort is None:
            return None
        if isinstance(sort, ComputedSort):
            return {"k": "computed", "n": sort.token}
        return {"k": "field", "n": sort.name}

    def _dump_join(self, join: Join) -> dict[str, Any]:
        return {
            "t": join.remote_table,
            "k": join.remote_key,
            "l": join.local_field,
            "f": [self._dump_condition(c) for c in join.conditions],
        }

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, token: str) -> StateSnapshot:
        """Parse *token*; raise :class:`StateDecodeError` when it is unusable."""
        if not isinstance(token, str) or not token:
            raise StateDecodeError("Empty state token")
        try:
            payload = self._sealer.unseal(token) if self._sealer is not None else _b64decode(token)
            document = json.loads(payload.decode("utf-8"), parse_constant=_reject_constant)
        except (binascii.Error, ValueError, RecursionError) as exc:
            raise StateDecodeError(f"Malformed state token: {exc}", cause=exc) from exc

        if not isinstance(document, dict):
            raise StateDecodeError("State token does not hold an object")
        version = document.get("v")
        if version != TOKEN_VERSION:
            raise StateDecodeError(f"Unsupported state token version {version!r}")

        try:
            return self._load_document(document)
        except StateDecodeError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError,
                PagerConfigurationError, ValidationError) as exc:
            raise StateDecodeError(f"Invalid state token contents: {exc}", cause=exc) from exc

    def _load_document(self, document: dict[str, Any]) -> StateSnapshot:
        classname = document["c"]
        if not isinstance(classname, str) or not classname:
            raise StateDecodeError("State token has no pager identity")
        page = document["p"]
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise StateDecodeError(f"Invalid page {page!r} in state token")
        conditions = {
            self._require_str(key): self._load_entry(key, entry)
            for key, entry in document["f"].items()
        }
        return StateSnapshot(
            classname=classname,
            conditions=conditions,
            page=page,
            sort=self._load_sort(document["s"]),
            direction=SortDirection.parse(document["d"]),
            joins=[self._load_join(j) for j in document["j"]],
        )

    @staticmethod
    def _require_str(value: Any) -> str:
        if not isinstance(value, str):
            raise StateDecodeError(f"Expected a string, got {type(value).__name__}")
        return value

    def _load_condition(self, raw: dict[str, Any]) -> Condition:
        value = raw["v"]
        if isinstance(value, list):
            value = tuple(value)
        for item in value if isinstance(value, tuple) else (value,):
            if isinstance(item, float) and not math.isfinite(item):
                raise StateDecodeError(f"Non-finite value {item!r} in state token")
        return Condition(self._require_str(raw["f"]), self._require_str(raw["o"]), value)

    def _load_entry(self, key: str, raw: Any) -> ConditionEntry:
        if key == SEARCH_KEY:
            return SearchCondition(
                self._require_str(raw["q"]),
                tuple(self._require_str(f) for f in raw["fs"]),
            )
        if not isinstance(raw, list):
            raise StateDecodeError(f"Conditions for {key!r} must be a list")
        return [self._load_condition(c) for c in raw]

    def _load_sort(self, raw: Any) -> SortKey | None:
        if raw is None:
            return None
        name = self._require_str(raw["n"])
        kind = raw["k"]
        if kind == "field":
            return Field(name)
        if kind == "computed":
            return ComputedSort(name)
        raise StateDecodeError(f"Unknown sort kind {kind!r}")

    def _load_join(self, raw: dict[str, Any]) -> Join:
        return Join(
            self._require_str(raw["t"]),
            self._require_str(raw["k"]),
            self._require_str(raw["l"]),
            [self._load_condition(c) for c in raw["f"]],
        )


__all__ = ["TOKEN_VERSION", "StateCodec", "TokenSealer"]
