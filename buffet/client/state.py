"""Client-side list state owned by one controller"""

from dataclasses import dataclass, field
from typing import Any, Optional

Item = dict[str, Any]


@dataclass
class Pagination:
    page: int = 1
    limit: int = 10
    total: int = 0
    totalPages: int = 0
    hasNext: bool = False
    hasPrev: bool = False

    @classmethod
    def from_response(cls, data: dict) -> "Pagination":
        return cls(
            page=data.get("page", 1),
            limit=data.get("limit", 10),
            total=data.get("total", 0),
            totalPages=data.get("totalPages", 0),
            hasNext=data.get("hasNext", False),
            hasPrev=data.get("hasPrev", False),
        )


@dataclass
class ListParams:
    """Active page, sort and filters; unset filters are left out of the query"""

    page: int = 1
    limit: int = 10
    sortBy: Optional[str] = None
    sortOrder: Optional[str] = None
    search: Optional[str] = None
    filters: dict[str, Any] = field(default_factory=dict)

    def to_query(self) -> dict[str, Any]:
        query = {
            "page": self.page,
            "limit": self.limit,
            "sortBy": self.sortBy,
            "sortOrder": self.sortOrder,
            "search": self.search,
            **self.filters,
        }
        return {k: v for k, v in query.items() if v is not None and v != ""}


@dataclass
class ListState:
    items: list[Item] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)
    params: ListParams = field(default_factory=ListParams)
    # Request status for the UI; a failed fetch updates these and keeps the rest
    loading: bool = False
    error: Optional[str] = None

    def ids(self) -> list[str]:
        return [item["id"] for item in self.items]

    def find(self, item_id: str) -> Optional[Item]:
        for item in self.items:
            if item.get("id") == item_id:
                return item
        return None


@dataclass(frozen=True)
class PendingMutation:
    """
    The target entry of an optimistic edit, as it was right before the edit.

    `index` and `previous` are None when the item was not in the local list.
    Restoring touches only that entry, so a rollback never undoes mutations
    of other items that were confirmed in the meantime.
    """

    item_id: str
    index: Optional[int]
    previous: Optional[Item]
    removed: bool = False

    @classmethod
    def capture(cls, state: ListState, item_id: str, removed: bool = False) -> "PendingMutation":
        for index, item in enumerate(state.items):
            if item.get("id") == item_id:
                return cls(item_id=item_id, index=index, previous=item, removed=removed)
        return cls(item_id=item_id, index=None, previous=None, removed=removed)

    def restore(self, state: ListState) -> None:
        """Re-insert a removed item at its old position, or swap an edited one back"""
        if self.previous is None:
            return

        items = list(state.items)
        position = next((i for i, item in enumerate(items) if item.get("id") == self.item_id), None)
        if self.removed:
            # A fetch may have brought it back already
            if position is None:
                items.insert(min(self.index, len(items)), self.previous)
        elif position is not None:
            items[position] = self.previous
        state.items = items
