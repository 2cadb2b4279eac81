import logging
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .database import get_db
from .exceptions import AuthenticationError
from .models import Admin
from .security_utils import decode_admin_token

logger = logging.getLogger(__name__)


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def get_current_admin(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Admin:
    """Resolve the admin behind the Bearer token"""
    token = _extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = decode_admin_token(token)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    admin = db.query(Admin).filter(Admin.id == payload.get("admin_id")).first()
    if not admin:
        logger.warning(f"⚠️ Token for unknown admin id {payload.get('admin_id')}")
        raise AuthenticationError("Admin not found")
    return admin


def get_optional_admin(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[Admin]:
    """Like get_current_admin, but anonymous callers get None"""
    if not authorization:
        return None
    return get_current_admin(authorization=authorization, db=db)
