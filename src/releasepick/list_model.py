"""
Selectable list of releases.

ReleaseListModel holds one ReleaseItem per catalog release, a cursor with
wrap-around navigation, and the single pending slot that marks the item whose
deployment is running. The pending slot and the item's status are always
changed together.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from releasepick.catalog import Release


class ItemStatus(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"


@dataclass
class ReleaseItem:
    """View model for one release row."""

    tag: str
    notes: str
    resolved_asset_id: Optional[int] = None
    resolved_asset_name: Optional[str] = None
    display_name: Optional[str] = None
    status: ItemStatus = ItemStatus.IDLE

    @classmethod
    def from_release(cls, release: Release) -> "ReleaseItem":
        asset = release.installable_asset()
        return cls(
            tag=release.tag,
            notes=release.notes,
            resolved_asset_id=asset.remote_id if asset else None,
            resolved_asset_name=asset.name if asset else None,
            display_name=release.display_name,
        )

    @property
    def has_installable_asset(self) -> bool:
        return self.resolved_asset_id is not None


class ReleaseListModel:
    """
    Cursor-based navigation over release items plus the pending-operation slot.

    Items are fixed at construction. All operations are safe no-ops on an empty
    list.
    """

    def __init__(self, items: Iterable[ReleaseItem]) -> None:
        self._items: Tuple[ReleaseItem, ...] = tuple(items)
        self.cursor: Optional[int] = None
        self.last_cursor: Optional[int] = None
        self.pending_index: Optional[int] = None

    @classmethod
    def from_releases(cls, releases: Iterable[Release]) -> "ReleaseListModel":
        return cls(ReleaseItem.from_release(release) for release in releases)

    @property
    def items(self) -> Tuple[ReleaseItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    # Navigation

    def select_next(self) -> None:
        if not self._items:
            return
        if self.cursor is None:
            self.cursor = self._resume_index()
        elif self.cursor >= len(self._items) - 1:
            self.cursor = 0
        else:
            self.cursor += 1

    def select_previous(self) -> None:
        if not self._items:
            return
        if self.cursor is None:
            self.cursor = self._resume_index()
        elif self.cursor == 0:
            self.cursor = len(self._items) - 1
        else:
            self.cursor -= 1

    def deselect(self) -> None:
        """Remember the current selection and clear it."""
        self.last_cursor = self.cursor
        self.cursor = None

    def select_first(self) -> None:
        if self._items:
            self.cursor = 0

    def select_last(self) -> None:
        if self._items:
            self.cursor = len(self._items) - 1

    def current_item(self) -> Optional[ReleaseItem]:
        if self.cursor is None:
            return None
        return self._items[self.cursor]

    def _resume_index(self) -> int:
        if self.last_cursor is None:
            return 0
        return self.last_cursor

    # Status state machine

    @property
    def pending_item(self) -> Optional[ReleaseItem]:
        if self.pending_index is None:
            return None
        return self._items[self.pending_index]

    def activate(self) -> Optional[int]:
        """
        Mark the selected item as in progress and claim the pending slot.

        Returns:
            The index of the activated item, or None when nothing is selected or
            another deployment already holds the pending slot.
        """
        if self.cursor is None or self.pending_index is not None:
            return None
        item = self._items[self.cursor]
        item.status = ItemStatus.IN_PROGRESS
        self.pending_index = self.cursor
        return self.cursor

    def finish(self, index: int) -> None:
        """
        Return the pending item to idle and release the pending slot.

        Raises:
            ValueError: If `index` does not hold the pending slot.
        """
        if self.pending_index is None or index != self.pending_index:
            raise ValueError(f"item {index} has no deployment in progress")
        self._items[index].status = ItemStatus.IDLE
        self.pending_index = None

    def in_progress_items(self) -> List[int]:
        return [
            index
            for index, item in enumerate(self._items)
            if item.status is ItemStatus.IN_PROGRESS
        ]
