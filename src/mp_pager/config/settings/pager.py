"""Config settings – PagerSettings."""
from __future__ import annotations

import dataclasses

from mp_pager.config.settings.base import Settings
from mp_pager.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class PagerSettings(Settings):
    """Pager knobs, read from ``PAGER_*`` environment variables.

    ``items_per_page`` of ``0`` disables the page window entirely.
    ``seal_key`` is a Fernet key; when set, state tokens are encrypted and
    authenticated instead of merely base64 encoded.
    """

    _prefix = "PAGER"

    items_per_page: int = 20
    sticky_pager: bool = False
    jump_to: bool = True
    token_param: str = "q"
    page_param: str = "p"
    session_namespace: str = "pager"
    seal_key: str | None = None

    def _validate(self) -> None:
        if self.items_per_page < 0:
            raise InvalidSettingValueError(
                "items_per_page", self.items_per_page, "must be >= 0"
            )
        if not self.token_param or not self.page_param:
            raise InvalidSettingValueError(
                "token_param", self.token_param, "query parameter names must be non-empty"
            )
        if self.token_param == self.page_param:
            raise InvalidSettingValueError(
                "page_param", self.page_param, "must differ from token_param"
            )


__all__ = ["PagerSettings"]
