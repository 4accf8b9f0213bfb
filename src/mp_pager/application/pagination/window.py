"""Application pagination – PageWindowPlanner and PageDescriptor."""
from __future__ import annotations

import dataclasses
from typing import Literal

DescriptorKind = Literal["page", "prev", "next", "ellipsis", "jump_to"]


@dataclasses.dataclass(frozen=True)
class PageDescriptor:
    """One entry of a rendered pager.

    ``number`` is set for ``page`` entries, ``target_page`` for ``prev`` and
    ``next``.  ``token`` is the state token a link to that entry carries; the
    planner leaves it empty and the :class:`Pager` fills it in.
    """

    kind: DescriptorKind
    number: int | None = None
    active: bool = False
    target_page: int | None = None
    token: str | None = None

    @classmethod
    def page(cls, number: int, active: bool = False) -> "PageDescriptor":
        return cls("page", number=number, active=active)

    @classmethod
    def prev(cls, target_page: int) -> "PageDescriptor":
        return cls("prev", target_page=target_page)

    @classmethod
    def next(cls, target_page: int) -> "PageDescriptor":
        return cls("next", target_page=target_page)

    @classmethod
    def ellipsis(cls) -> "PageDescriptor":
        return cls("ellipsis")

    @classmethod
    def jump_to(cls) -> "PageDescriptor":
        return cls("jump_to")

    @property
    def target(self) -> int | None:
        """Page a link on this descriptor navigates to."""
        if self.kind == "page":
            return self.number
        return self.target_page

    @property
    def is_link(self) -> bool:
        return self.target is not None


class PageWindowPlanner:
    """Choose which page numbers a pager shows for a possibly huge result.

    The first and last two pages are always present, together with two
    pages either side of the current one.  Near either end the window is
    widened to seven pages so the pager keeps a steady width.
    """

    EDGE_PAGES = 2
    NEIGHBOURS = 2
    EDGE_DISTANCE = 5
    FRONT_WINDOW = 7
    BACK_WINDOW = 6

    @staticmethod
    def total_pages(total_items: int, page_size: int) -> int:
        if page_size <= 0 or total_items <= 0:
            return 0
        return -(-total_items // page_size)

    def visible_pages(self, total_pages: int, current_page: int) -> list[int]:
        candidates = set(range(1, self.EDGE_PAGES + 1))
        candidates.update(range(current_page - self.NEIGHBOURS, current_page + self.NEIGHBOURS + 1))
        candidates.update(range(total_pages - self.EDGE_PAGES + 1, total_pages + 1))
        if current_page < self.EDGE_DISTANCE:
            candidates.update(range(1, self.FRONT_WINDOW + 1))
        if current_page > total_pages - self.EDGE_DISTANCE:
            candidates.update(range(total_pages - self.BACK_WINDOW, total_pages + 1))
        return sorted(i for i in candidates if 1 <= i <= total_pages)

    def plan(
        self,
        total_items: int,
        page_size: int,
        current_page: int,
        has_jump_to: bool = False,
    ) -> list[PageDescriptor]:
        total_pages = self.total_pages(total_items, page_size)
        if total_pages <= 1:
            return []

        window: list[PageDescriptor] = []
        if current_page > 1:
            window.append(PageDescriptor.prev(current_page - 1))

        previous: int | None = None
        for number in self.visible_pages(total_pages, current_page):
            if previous is not None and number - previous > 1:
                window.append(PageDescriptor.ellipsis())
            window.append(PageDescriptor.page(number, active=number == current_page))
            previous = number

        if current_page < total_pages:
            window.append(PageDescriptor.next(current_page + 1))
        if has_jump_to:
            window.append(PageDescriptor.jump_to())
        return window


__all__ = ["DescriptorKind", "PageDescriptor", "PageWindowPlanner"]
