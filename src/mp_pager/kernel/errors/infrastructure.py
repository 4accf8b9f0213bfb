"""Infrastructure errors – payload (de)serialisation failures."""

from __future__ import annotations

from typing import Any

from mp_pager.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class StateEncodeError(SerializationError):
    """Pager state could not be turned into a token."""

    default_code = "state_encode_error"

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, payload_type="pager_state", **kwargs)


class StateDecodeError(SerializationError):
    """A state token is malformed, tampered with, or of an unknown version.

    Recoverable: the pager falls back to its configured defaults.
    """

    default_code = "state_decode_error"

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, payload_type="pager_state", **kwargs)


__all__ = [
    "InfrastructureError",
    "SerializationError",
    "StateDecodeError",
    "StateEncodeError",
]
