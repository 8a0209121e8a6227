"""
Security utilities: password hashing and session cookie signing
"""

import logging
import secrets
from typing import Optional

from itsdangerous import BadSignature, URLSafeSerializer
from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS, SESSION_SECRET

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

_session_serializer = URLSafeSerializer(SESSION_SECRET, salt="buffet-session")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# SESSION TOKENS
# ============================================================================


def generate_session_id() -> str:
    """Generate a cryptographically secure session id"""
    return secrets.token_urlsafe(32)


def sign_session_id(sid: str) -> str:
    return _session_serializer.dumps(sid)


def unsign_session_id(cookie_value: str) -> Optional[str]:
    """Return the sid carried by a cookie, or None when the signature is invalid"""
    try:
        sid = _session_serializer.loads(cookie_value)
    except BadSignature:
        logger.warning("🚫 Session cookie with invalid signature")
        return None
    return sid if isinstance(sid, str) else None
