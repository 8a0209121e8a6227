"""Client service - Business logic for client operations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client
from ...shared.pagination import PageParams, PaginationMeta, paginate
from .repository import ClientRepository
from .schemas import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def list_clients(
        self,
        page: PageParams,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[Client], PaginationMeta]:
        query = self.repo.search_query(self.db, search, sort_by, sort_order)
        clients, pagination = paginate(query, page)
        logger.info(
            f"Listed clients: {len(clients)} of {pagination.total} total "
            f"(page: {page.page}, limit: {page.limit}, search: {search or 'none'}, "
            f"sort: {sort_by} {sort_order})"
        )
        return clients, pagination

    def get_client(self, client_id: str) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        logger.info(f"📥 Creating client: {data.name}")

        if data.email and self.repo.get_client_by_email(self.db, data.email):
            logger.warning(f"⚠️ Client email already exists: {data.email}")
            raise HTTPException(status_code=409, detail="Email already exists")

        client = self.repo.create_client(self.db, **data.model_dump())
        logger.info(
            f"✅ Created client: {client.name} (clientId: {client.id}, email: {client.email or 'none'})"
        )
        return client

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        client = self.get_client(client_id)
        updates = data.model_dump(exclude_unset=True)

        if "name" in updates and updates["name"] is None:
            raise HTTPException(status_code=400, detail="Client name cannot be empty")

        new_email = updates.get("email")
        if new_email and new_email != client.email:
            if self.repo.get_client_by_email(self.db, new_email):
                raise HTTPException(status_code=409, detail="Email already exists")

        client = self.repo.update_client(self.db, client, **updates)
        logger.info(
            f"✏️ Updated client: {client.name} (clientId: {client_id}, changes: {', '.join(updates)})"
        )
        return client

    def delete_client(self, client_id: str) -> None:
        client = self.get_client(client_id)

        if client.events:
            raise HTTPException(
                status_code=409,
                detail=f"Client has {len(client.events)} event(s); delete them first",
            )

        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Deleted client: {client.name} (clientId: {client_id})")
