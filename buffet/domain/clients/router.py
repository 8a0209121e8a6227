"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Client
from ...shared.pagination import PageParams, SortOrder, page_params
from ...shared.validators import as_utc
from .schemas import (
    ClientCreate,
    ClientListResponse,
    ClientResponse,
    ClientSortField,
    ClientUpdate,
)
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/clients", tags=["Clients"], dependencies=[Depends(get_current_user)]
)


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


def to_client_response(client: Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        phone=client.phone,
        email=client.email,
        address=client.address,
        notes=client.notes,
        createdAt=as_utc(client.created_at),
        updatedAt=as_utc(client.updated_at),
    )


@router.get("", response_model=ClientListResponse)
async def list_clients(
    page: PageParams = Depends(page_params),
    search: Optional[str] = Query(None),
    sort_by: ClientSortField = Query("createdAt", alias="sortBy"),
    sort_order: SortOrder = Query("desc", alias="sortOrder"),
    service: ClientService = Depends(get_client_service),
):
    """List clients with pagination and search"""
    clients, pagination = service.list_clients(page, search, sort_by, sort_order)
    return ClientListResponse(
        items=[to_client_response(c) for c in clients], pagination=pagination
    )


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: str, service: ClientService = Depends(get_client_service)):
    return to_client_response(service.get_client(client_id))


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(data: ClientCreate, service: ClientService = Depends(get_client_service)):
    return to_client_response(service.create_client(data))


@router.api_route("/{client_id}", methods=["PUT", "PATCH"], response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    service: ClientService = Depends(get_client_service),
):
    """Partially update a client"""
    return to_client_response(service.update_client(client_id, data))


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, service: ClientService = Depends(get_client_service)):
    service.delete_client(client_id)
