import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from .config import IS_PRODUCTION, SESSION_COOKIE_NAME, SESSION_MAX_AGE
from .database import get_db
from .models import User, UserSession, utcnow
from .security_utils import generate_session_id, sign_session_id, unsign_session_id

logger = logging.getLogger(__name__)


# ============================================================================
# SESSION STORE
# ============================================================================


def create_session(db: Session, user: User) -> str:
    """Persist a new session for the user and return its sid"""
    sid = generate_session_id()
    db.add(
        UserSession(
            sid=sid,
            user_id=user.id,
            expires_at=utcnow() + timedelta(seconds=SESSION_MAX_AGE),
        )
    )
    db.commit()
    logger.info(f"🔑 Session created for user {user.id}")
    return sid


def destroy_session(db: Session, sid: str) -> None:
    db.query(UserSession).filter(UserSession.sid == sid).delete(synchronize_session=False)
    db.commit()


def purge_expired_sessions(db: Session) -> int:
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info(f"🧹 Purged {deleted} expired sessions")
    return deleted


def set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sign_session_id(sid),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="none" if IS_PRODUCTION else "lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


def get_session_id(request: Request) -> Optional[str]:
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if not cookie:
        return None
    return unsign_session_id(cookie)


# ============================================================================
# DEPENDENCIES
# ============================================================================


async def get_current_user(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the logged-in user from the session cookie.

    Sessions are rolling: every authenticated request pushes the expiry
    forward and re-issues the cookie.
    """
    sid = get_session_id(request)
    session = None
    if sid:
        session = db.query(UserSession).filter(UserSession.sid == sid).first()

    if not session or session.expires_at <= utcnow():
        if session:
            logger.info(f"ℹ️ Session expired for user {session.user_id}")
            db.delete(session)
            db.commit()
        raise HTTPException(
            status_code=401,
            detail={
                "error": "Unauthorized",
                "message": "You need to be logged in to access this resource",
            },
        )

    session.expires_at = utcnow() + timedelta(seconds=SESSION_MAX_AGE)
    db.commit()
    set_session_cookie(response, session.sid)

    request.state.user_id = session.user_id
    return session.user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        logger.warning(f"🚫 User {current_user.id} tried to access an admin-only resource")
        raise HTTPException(
            status_code=403,
            detail={
                "error": "Access denied",
                "message": "You need to be an administrator to access this resource",
            },
        )
    return current_user
