"""
Navigation links to the operational pages of a service.

The host application renders these; jobwatch only keeps the items. Two bars
exist: the main bar (empty by default) and the right-hand bar, which always
links to the status page under the management base path.
"""

from __future__ import annotations

import bisect
import sys
from dataclasses import dataclass, field

_TOP = 0
_BOTTOM = sys.maxsize


def top() -> int:
    return _TOP


def bottom() -> int:
    return _BOTTOM


@dataclass(frozen=True, order=True)
class NavBarItem:
    """One link; lower positions come first."""
    position: int
    title: str = field(compare=False)
    link: str = field(compare=False)


class NavBar:
    """Ordered collection of navigation items.

    Items with equal positions keep their registration order.
    """

    def __init__(self, items: list[NavBarItem] | None = None):
        self._items: list[NavBarItem] = []
        for item in items or []:
            self.register(item)

    @property
    def items(self) -> list[NavBarItem]:
        return list(self._items)

    def register(self, item: NavBarItem) -> NavBarItem:
        index = bisect.bisect_right([i.position for i in self._items], item.position)
        self._items.insert(index, item)
        return item

    def __len__(self) -> int:
        return len(self._items)


def main_nav_bar() -> NavBar:
    return NavBar()


def right_nav_bar(management_base_path: str = "/internal") -> NavBar:
    base = management_base_path.rstrip("/")
    return NavBar([NavBarItem(top(), "Status", f"{base}/status")])


def jobs_nav_item(management_base_path: str = "/internal", position: int | None = None) -> NavBarItem:
    """Link to the job overview page."""
    base = management_base_path.rstrip("/")
    return NavBarItem(bottom() if position is None else position, "Jobs", f"{base}/jobs")


__all__ = [
    "NavBarItem",
    "NavBar",
    "top",
    "bottom",
    "main_nav_bar",
    "right_nav_bar",
    "jobs_nav_item",
]
