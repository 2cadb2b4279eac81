from __future__ import annotations

import os

# Must be set before clinic_api is imported: engine and config read them at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PAYMONGO_WEBHOOK_SECRET"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from clinic_api.database import Base, SessionLocal, engine
from clinic_api.main import app
from clinic_api.models import Admin, Appointment, BasicInfo, Procedure, Service
from clinic_api.security_utils import create_admin_token
from clinic_api.services.paymongo_service import PaymentLink, PayMongoService, get_paymongo_service
from clinic_api.verification_store import VerificationStore, get_verification_store

KNOWN_CODE = "482913"


class FakeClock:
    """Manually advanced UTC clock for expiry tests"""

    def __init__(self) -> None:
        self.now = datetime(2025, 4, 21, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> VerificationStore:
    return VerificationStore(ttl_seconds=300, clock=clock)


@pytest.fixture
def fixed_code():
    with patch("clinic_api.verification_store.generate_verification_code", return_value=KNOWN_CODE):
        yield KNOWN_CODE


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway() -> PayMongoService:
    service = PayMongoService(secret_key="sk_test_123")
    service.create_link = AsyncMock(
        return_value=PaymentLink(payment_id="link_99", payment_url="https://pm.link/clinic/test/99")
    )
    return service


@pytest.fixture
def sent_emails():
    with patch("clinic_api.email_service.send_email", new=AsyncMock(return_value={"id": "email_1"})) as send:
        yield send


@pytest.fixture
def client(db_session, store, gateway, sent_emails):
    app.dependency_overrides[get_verification_store] = lambda: store
    app.dependency_overrides[get_paymongo_service] = lambda: gateway
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def procedure(db_session) -> Procedure:
    service = Service(name="Blood Chemistry")
    db_session.add(service)
    db_session.flush()
    proc = Procedure(name="Total Cholesterol", price=Decimal("300.00"), service_id=service.id)
    db_session.add(proc)
    db_session.commit()
    db_session.refresh(proc)
    return proc


@pytest.fixture
def make_appointment(db_session, procedure):
    def _make(
        *,
        email: str = "eleanor@example.com",
        appointment_date: date | None = None,
        status: str = "pending",
        email_verified: bool = False,
        payment_id: str | None = None,
        payment_url: str | None = None,
        payment_status: str | None = None,
        first_name: str = "Eleanor",
        last_name: str = "Agapito",
    ) -> Appointment:
        patient = BasicInfo(
            first_name=first_name,
            last_name=last_name,
            email=email,
            contact_no="+639123456789",
            sex="Female",
            age=65,
        )
        db_session.add(patient)
        db_session.flush()
        appointment = Appointment(
            basic_info_id=patient.id,
            procedure_id=procedure.id,
            appointment_date=appointment_date or date.today() + timedelta(days=3),
            appointment_time="8:00 AM - 9:00 AM",
            reason="For Job Requirements",
            status=status,
            email_verified=email_verified,
            payment_id=payment_id,
            payment_url=payment_url,
            payment_status=payment_status,
        )
        db_session.add(appointment)
        db_session.commit()
        db_session.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def admin(db_session) -> Admin:
    # Hash is never checked by token-authenticated routes
    user = Admin(email="staff@clinic.com", password="not-a-real-hash", role="admin")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_admin_token(admin.id, admin.role)}"}
