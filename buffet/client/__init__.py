"""Dashboard client - HTTP transport, list state and optimistic list controllers"""

from .controller import OptimisticListController
from .entities import (
    ClientAdapter,
    EntityAdapter,
    EventAdapter,
    PaymentAdapter,
    clients_controller,
    events_controller,
    payments_controller,
)
from .errors import ApiError, NetworkError, ServerError, ValidationError, normalize_error
from .state import ListParams, ListState, Pagination, PendingMutation
from .transport import ApiClient

__all__ = [
    "ApiClient",
    "ApiError",
    "ClientAdapter",
    "EntityAdapter",
    "EventAdapter",
    "ListParams",
    "ListState",
    "NetworkError",
    "OptimisticListController",
    "Pagination",
    "PaymentAdapter",
    "PendingMutation",
    "ServerError",
    "ValidationError",
    "clients_controller",
    "events_controller",
    "normalize_error",
    "payments_controller",
]
