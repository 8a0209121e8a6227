"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy import asc, desc, or_
from sqlalchemy.orm import Query, Session

from ...models import Client

SORT_COLUMNS = {
    "name": Client.name,
    "createdAt": Client.created_at,
    "updatedAt": Client.updated_at,
}


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def search_query(
        db: Session,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Query:
        """Build the filtered, sorted client query used by the list endpoint"""
        query = db.query(Client)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Client.name.ilike(search_term),
                    Client.email.ilike(search_term),
                    Client.phone.ilike(search_term),
                )
            )

        column = SORT_COLUMNS[sort_by]
        return query.order_by(asc(column) if sort_order == "asc" else desc(column), Client.id)

    @staticmethod
    def get_client_by_id(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_client_by_email(db: Session, email: str) -> Optional[Client]:
        return db.query(Client).filter(Client.email == email).first()

    @staticmethod
    def create_client(db: Session, **client_data) -> Client:
        client = Client(**client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        db.delete(client)
        db.commit()
