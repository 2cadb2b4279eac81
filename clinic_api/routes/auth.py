import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from ..auth import get_optional_admin
from ..database import get_db
from ..exceptions import AdminExistsError, AuthenticationError, PermissionDeniedError
from ..models import Admin
from ..security_utils import create_admin_token, hash_password_bcrypt, verify_password_bcrypt
from ..shared.validators import validate_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

ADMIN_ROLES = ("admin", "superadmin")


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class RegisterRequest(LoginRequest):
    password: str = Field(..., min_length=8, max_length=72)
    role: str = "admin"

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in ADMIN_ROLES:
            raise ValueError(f"Role must be one of {list(ADMIN_ROLES)}")
        return v


def _authenticate(db: Session, email: str, password: str) -> Admin:
    admin = db.query(Admin).filter(Admin.email == email).first()
    if not admin or not verify_password_bcrypt(password, admin.password):
        logger.warning(f"⚠️ Failed admin login for {email}")
        raise AuthenticationError("Invalid credentials")
    return admin


@router.post("/login")
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Admin login; returns a bearer token for the admin API"""
    admin = _authenticate(db, request.email, request.password)

    admin.last_login = datetime.now(timezone.utc)
    db.commit()
    logger.info(f"🔐 Admin logged in: {admin.email}")

    return {
        "success": True,
        "message": "Admin logged in",
        "data": {
            "email": admin.email,
            "role": admin.role,
            "token": create_admin_token(admin.id, admin.role),
        },
    }


@router.post("/register")
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    current_admin: Optional[Admin] = Depends(get_optional_admin),
):
    """
    Register a new admin user

    The first admin can be created anonymously; afterwards a superadmin token
    is required.
    """
    has_admins = db.query(Admin.id).first() is not None
    if has_admins and (current_admin is None or current_admin.role != "superadmin"):
        raise PermissionDeniedError()

    if db.query(Admin).filter(Admin.email == request.email).first():
        raise AdminExistsError()

    # Bootstrap account must be able to create the rest
    role = request.role if has_admins else "superadmin"
    admin = Admin(email=request.email, password=hash_password_bcrypt(request.password), role=role)
    db.add(admin)
    db.commit()
    logger.info(f"👤 Admin user created: {admin.email} ({role})")

    return {"success": True, "message": "User created", "user": {"email": admin.email, "role": role}}


@router.post("/verify-password")
async def verify_password(request: LoginRequest, db: Session = Depends(get_db)):
    """Re-check an admin password (used before a secure logout)"""
    admin = _authenticate(db, request.email, request.password)
    return {
        "success": True,
        "message": "Password verified successfully",
        "data": {"email": admin.email, "role": admin.role},
    }
