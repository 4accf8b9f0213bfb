"""Redis adapter – RedisSessionStore."""
from __future__ import annotations

from typing import Any


def _require_redis() -> Any:
    try:
        import redis
        return redis
    except ImportError as exc:
        raise ImportError("Install 'mp-pager[redis]' to use the Redis adapter") from exc


class RedisSessionStore:
    """Sticky pager slots kept in Redis, one key per fingerprint.

    Writes are plain ``SET`` calls: concurrent requests for the same view
    race and the last write wins.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        client: Any = None,
        prefix: str = "",
        ttl: int | None = None,
        **kwargs: Any,
    ) -> None:
        if client is None:
            if url is None:
                raise ValueError("RedisSessionStore needs a url or a client")
            client = _require_redis().Redis.from_url(url, **kwargs)
        self._client = client
        self._prefix = prefix
        self._ttl = ttl

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        raw = self._client.get(self._key(key))
        if raw is None:
            return None
        return raw.decode("ascii") if isinstance(raw, bytes) else str(raw)

    def set(self, key: str, token: str) -> None:
        self._client.set(self._key(key), token, ex=self._ttl)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def close(self) -> None:
        self._client.close()


__all__ = ["RedisSessionStore"]
