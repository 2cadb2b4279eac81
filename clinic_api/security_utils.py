"""
Admin credential and token utilities
"""

import logging
from typing import Any, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from .config import ADMIN_TOKEN_MAX_AGE_SECONDS, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

token_serializer = URLSafeTimedSerializer(SECRET_KEY, salt="admin-session")


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_admin_token(admin_id: int, role: str) -> str:
    """Signed, timestamped bearer token for the admin API"""
    return token_serializer.dumps({"admin_id": admin_id, "role": role})


def decode_admin_token(
    token: str, max_age: int = ADMIN_TOKEN_MAX_AGE_SECONDS
) -> Optional[dict[str, Any]]:
    """Return the token payload, or None when invalid or expired"""
    try:
        return token_serializer.loads(token, max_age=max_age)
    except SignatureExpired:
        logger.warning("⏰ Admin token expired")
        return None
    except BadSignature:
        logger.warning("⚠️ Invalid admin token signature")
        return None
