import logging
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from ..auth import (
    clear_session_cookie,
    create_session,
    destroy_session,
    get_current_user,
    get_session_id,
    require_admin,
    set_session_cookie,
)
from ..database import get_db
from ..models import User
from ..security_utils import hash_password, verify_password
from ..shared.validators import as_utc, validate_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str
    password: str = Field(min_length=6)
    role: Literal["admin", "operator"] = "operator"

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    createdAt: datetime | None = None


def to_user_response(user: User, with_created: bool = False) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        createdAt=as_utc(user.created_at) if with_created else None,
    )


@router.get("")
async def auth_index():
    """List available authentication routes"""
    return {
        "message": "Authentication API",
        "version": "1.0.0",
        "endpoints": {
            "POST /api/auth/login": "Log in",
            "POST /api/auth/logout": "Log out (authenticated)",
            "GET /api/auth/me": "Current user (authenticated)",
            "POST /api/auth/create-user": "Create a user (admin)",
            "GET /api/auth/users": "List users (admin)",
        },
        "status": "online",
    }


@router.post("/login")
async def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == data.username).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"🚫 Failed login attempt for username: {data.username}")
        raise HTTPException(
            status_code=401,
            detail={"error": "Invalid credentials", "message": "Incorrect username or password"},
        )

    sid = create_session(db, user)
    set_session_cookie(response, sid)
    logger.info(f"✅ User logged in: {user.username} ({user.id})")

    return {
        "message": "Logged in successfully",
        "user": to_user_response(user).model_dump(exclude_none=True),
    }


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sid = get_session_id(request)
    if sid:
        destroy_session(db, sid)
    clear_session_cookie(response)
    logger.info(f"👋 User logged out: {current_user.id}")
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return {"user": to_user_response(current_user).model_dump(exclude_none=True)}


@router.post("/create-user", status_code=201)
async def create_user(
    data: CreateUserRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a dashboard user (admin only)"""
    if db.query(User).filter(User.username == data.username).first():
        raise HTTPException(
            status_code=409, detail={"error": "Conflict", "message": "Username already in use"}
        )
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(
            status_code=409, detail={"error": "Conflict", "message": "Email already in use"}
        )

    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"✅ User created: {user.username} ({user.id}) by {admin.id}")
    return {
        "message": "User created successfully",
        "user": to_user_response(user, with_created=True).model_dump(mode="json"),
    }


@router.get("/users")
async def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at).all()
    return {
        "users": [
            {
                **to_user_response(u, with_created=True).model_dump(mode="json"),
                "updatedAt": as_utc(u.updated_at).isoformat(),
            }
            for u in users
        ],
        "total": len(users),
    }
