"""Per-entity adapters binding the list controller to a REST resource"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .controller import OptimisticListController
from .dates import convert_dates, serialize_dates, to_iso
from .state import Item, ListParams, ListState, Pagination
from .transport import ApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityConfig:
    path: str
    date_fields: tuple[str, ...]
    sort_fields: tuple[str, ...]
    default_sort: str
    default_order: str = "asc"
    list_key: str = "items"


CLIENTS = EntityConfig(
    path="/clients",
    date_fields=("createdAt", "updatedAt"),
    sort_fields=("name", "createdAt", "updatedAt"),
    default_sort="createdAt",
    default_order="desc",
)

EVENTS = EntityConfig(
    path="/events",
    date_fields=("date", "createdAt", "updatedAt"),
    sort_fields=("date", "title", "createdAt", "totalValue"),
    default_sort="date",
)

PAYMENTS = EntityConfig(
    path="/payments",
    date_fields=("dueDate", "paymentDate", "createdAt", "updatedAt", "event.date"),
    sort_fields=("dueDate", "paymentDate", "amount", "createdAt"),
    default_sort="dueDate",
)


class EntityAdapter:
    """CRUD calls for one resource, with ISO dates converted on the way in"""

    def __init__(self, api: ApiClient, config: EntityConfig):
        self.api = api
        self.config = config

    @property
    def path(self) -> str:
        return self.config.path

    def default_params(self) -> ListParams:
        return ListParams(sortBy=self.config.default_sort, sortOrder=self.config.default_order)

    def to_item(self, raw: dict) -> Item:
        return convert_dates(raw, self.config.date_fields)

    def convert_patch(self, patch: dict) -> Item:
        return convert_dates(patch, [f for f in self.config.date_fields if "." not in f])

    async def list(self, params: ListParams) -> tuple[list[Item], Pagination]:
        if params.sortBy and params.sortBy not in self.config.sort_fields:
            raise ValueError(
                f"Cannot sort {self.path} by {params.sortBy!r}; "
                f"expected one of {', '.join(self.config.sort_fields)}"
            )

        data = await self.api.get(self.path, params=params.to_query())
        items = [self.to_item(raw) for raw in data.get(self.config.list_key, [])]
        return items, Pagination.from_response(data.get("pagination", {}))

    async def get(self, item_id: str) -> Item:
        return self.to_item(await self.api.get(f"{self.path}/{item_id}"))

    async def create(self, payload: dict) -> Item:
        return self.to_item(await self.api.post(self.path, serialize_dates(payload)))

    async def update(self, item_id: str, patch: dict) -> Item:
        return self.to_item(await self.api.put(f"{self.path}/{item_id}", serialize_dates(patch)))

    async def delete(self, item_id: str) -> None:
        await self.api.delete(f"{self.path}/{item_id}")


class ClientAdapter(EntityAdapter):
    def __init__(self, api: ApiClient):
        super().__init__(api, CLIENTS)


class EventAdapter(EntityAdapter):
    def __init__(self, api: ApiClient):
        super().__init__(api, EVENTS)

    async def calendar(self, year: int, month: int) -> dict[str, Any]:
        data = await self.api.get(f"{self.path}/calendar/{year}/{month}")
        data["events"] = [convert_dates(e, ("date",)) for e in data.get("events", [])]
        return data


class PaymentAdapter(EntityAdapter):
    def __init__(self, api: ApiClient):
        super().__init__(api, PAYMENTS)

    async def event_summary(self, event_id: str) -> dict[str, Any]:
        """Payments of one event plus paid/pending totals"""
        data = await self.api.get(f"{self.path}/event/{event_id}")
        data["payments"] = [self.to_item(p) for p in data.get("payments", [])]
        return data

    async def analytics(self, period: int = 30) -> dict[str, Any]:
        return await self.api.get(f"{self.path}/analytics/summary", params={"period": period})

    async def detailed_analytics(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> dict[str, Any]:
        params = {
            "dateFrom": to_iso(date_from),
            "dateTo": to_iso(date_to),
            "clientId": client_id,
            "status": status,
            "paymentMethod": payment_method,
        }
        return await self.api.get(f"{self.path}/analytics/detailed", params=params)


def _controller(adapter: EntityAdapter, state: Optional[ListState]) -> OptimisticListController:
    if state is None:
        state = ListState(params=adapter.default_params())
    return OptimisticListController(adapter, state)


def clients_controller(api: ApiClient, state: Optional[ListState] = None) -> OptimisticListController:
    return _controller(ClientAdapter(api), state)


def events_controller(api: ApiClient, state: Optional[ListState] = None) -> OptimisticListController:
    return _controller(EventAdapter(api), state)


def payments_controller(api: ApiClient, state: Optional[ListState] = None) -> OptimisticListController:
    return _controller(PaymentAdapter(api), state)
