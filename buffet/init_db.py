"""
Database initialization script
Usage: python -m buffet.init_db [--reset] [--admin-username admin] [--admin-password ...]

Creates all tables and seeds an admin user when no admin exists yet.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from sqlalchemy.orm import Session

from .database import Base, SessionLocal, engine
from .models import User
from .security_utils import hash_password

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@buffet.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def create_tables(reset: bool = False) -> None:
    if reset:
        logger.warning("⚠️ Dropping all tables...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("✅ Tables ready")


def seed_admin(db: Session, username: str, email: str, password: str) -> Optional[User]:
    """Create the admin account unless one already exists; returns the new user"""
    existing = db.query(User).filter(User.role == "admin").first()
    if existing:
        logger.info(f"✅ Admin already exists ({existing.username})")
        return None

    admin = User(
        username=username,
        email=email.lower(),
        password_hash=hash_password(password),
        role="admin",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(
        f"🎉 Admin user created (id: {admin.id}, username: {username}) - change the password after first login!"
    )
    return admin


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Create tables and seed the admin user")
    parser.add_argument("--reset", action="store_true", help="drop all tables first (destroys data)")
    parser.add_argument("--admin-username", default=DEFAULT_ADMIN_USERNAME)
    parser.add_argument("--admin-email", default=DEFAULT_ADMIN_EMAIL)
    parser.add_argument("--admin-password", default=DEFAULT_ADMIN_PASSWORD)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if len(args.admin_password) < 6:
        logger.error("Admin password must be at least 6 characters")
        return 1

    logger.info("🔄 Initializing database...")
    try:
        create_tables(reset=args.reset)
        db = SessionLocal()
        try:
            seed_admin(db, args.admin_username, args.admin_email, args.admin_password)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        return 1

    logger.info("✅ Database initialized")
    return 0


if __name__ == "__main__":
    sys.exit(main())
