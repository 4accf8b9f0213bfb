from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from mp_pager.kernel.errors import StateDecodeError

__all__ = ["FernetTokenSealer"]


class FernetTokenSealer:
    """Encrypt and authenticate state tokens; supports key rotation via MultiFernet.

    The first key seals, every key may unseal.  Tokens carry no ``=``
    padding so they stay a single clean query-string value.
    """

    def __init__(self, keys: list[bytes | str], *, ttl: int | None = None) -> None:
        if not keys:
            raise ValueError("FernetTokenSealer needs at least one key")
        fernet_keys = [Fernet(k if isinstance(k, bytes) else k.encode()) for k in keys]
        self._multi = MultiFernet(fernet_keys)
        self._ttl = ttl

    @classmethod
    def generate_key(cls) -> bytes:
        return Fernet.generate_key()

    def seal(self, payload: bytes) -> str:
        return self._multi.encrypt(payload).decode("ascii").rstrip("=")

    def unseal(self, token: str) -> bytes:
        padded = token + "=" * (-len(token) % 4)
        try:
            return self._multi.decrypt(padded.encode("ascii"), ttl=self._ttl)
        except (InvalidToken, UnicodeEncodeError) as exc:
            raise StateDecodeError("State token failed authentication", cause=exc) from exc
