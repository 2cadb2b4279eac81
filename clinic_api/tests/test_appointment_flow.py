from datetime import date, timedelta
from decimal import Decimal

from clinic_api.exceptions import EmailTransportError, PaymentGatewayError
from clinic_api.models import Appointment
from clinic_api.services.paymongo_service import PaymentLink


def submission(procedure_id, **overrides):
    data = {
        "first_name": "Eleanor",
        "last_name": "Agapito",
        "email": "Eleanor@Example.com",
        "contact_no": "+639123456789",
        "sex": "Female",
        "age": 65,
        "date_of_birth": "1960-01-01",
        "address": "Batangas City",
        "reason": "For Job Requirements",
        "procedure_id": procedure_id,
        "appointment_date": (date.today() + timedelta(days=3)).isoformat(),
        "appointment_time": "8:00 AM - 9:00 AM",
    }
    data.update(overrides)
    return data


def test_submit_creates_pending_appointment_and_sends_code(
    client, db_session, store, procedure, fixed_code, sent_emails
):
    response = client.post("/api/appointment/submit-appointment", json=submission(procedure.id))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert fixed_code not in response.text

    appointment = db_session.get(Appointment, body["appointment_id"])
    assert appointment.status == "pending"
    assert appointment.email_verified is False
    assert appointment.payment_status is None
    assert appointment.basic_info.email == "eleanor@example.com"
    assert store.has_pending("eleanor@example.com")
    assert sent_emails.await_args.kwargs["to"] == "eleanor@example.com"


def test_submit_unknown_procedure(client, procedure, sent_emails):
    response = client.post("/api/appointment/submit-appointment", json=submission(9999))

    assert response.status_code == 404
    assert response.json()["message"] == "Procedure not found"
    sent_emails.assert_not_awaited()


def test_submit_keeps_appointment_when_email_fails(client, db_session, store, procedure, sent_emails):
    sent_emails.side_effect = EmailTransportError("Failed to send email: provider down")

    response = client.post("/api/appointment/submit-appointment", json=submission(procedure.id))

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert db_session.get(Appointment, body["appointment_id"]) is not None
    assert len(store) == 0


def test_confirm_email_creates_payment_link(client, db_session, procedure, gateway, fixed_code):
    appointment_id = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id)
    ).json()["appointment_id"]

    response = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": fixed_code}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["email_verified"] is True
    assert body["payment_url"] == "https://pm.link/clinic/test/99"

    public = body["appointment"]
    assert public["payment_url"] == "https://pm.link/clinic/test/99"
    assert "payment_id" not in public
    assert "payment_status" not in public
    assert "basic_info" not in public

    kwargs = gateway.create_link.await_args.kwargs
    assert kwargs["amount"] == Decimal("300.00")
    assert kwargs["name"] == "Eleanor Agapito"
    assert kwargs["email"] == "eleanor@example.com"
    assert "Total Cholesterol" in kwargs["description"]

    db_session.expire_all()
    appointment = db_session.get(Appointment, appointment_id)
    assert appointment.email_verified is True
    assert appointment.payment_id == "link_99"
    assert appointment.payment_status == "pending"
    assert appointment.status == "pending"


def test_confirm_with_wrong_code(client, db_session, procedure, gateway, fixed_code):
    appointment_id = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id)
    ).json()["appointment_id"]

    response = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": "000000"}
    )

    assert response.status_code == 400
    gateway.create_link.assert_not_awaited()
    assert db_session.get(Appointment, appointment_id).email_verified is False

    retry = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": fixed_code}
    )
    assert retry.status_code == 200


def test_confirm_with_expired_code(client, clock, procedure, fixed_code):
    appointment_id = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id)
    ).json()["appointment_id"]
    clock.advance(minutes=6)

    response = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": fixed_code}
    )

    assert response.status_code == 400
    assert "expired" in response.json()["message"]


def test_gateway_failure_keeps_email_verified(client, db_session, procedure, gateway, fixed_code):
    gateway.create_link.side_effect = PaymentGatewayError(
        "PayMongo API error: The value for amount cannot be less than 10000."
    )
    appointment_id = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id)
    ).json()["appointment_id"]

    response = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": fixed_code}
    )

    assert response.status_code == 502
    body = response.json()
    assert body["email_verified"] is True
    assert "cannot be less than 10000" in body["error"]

    db_session.expire_all()
    appointment = db_session.get(Appointment, appointment_id)
    assert appointment.email_verified is True
    assert appointment.payment_id is None

    gateway.create_link.side_effect = None
    retry = client.post(f"/api/appointment/{appointment_id}/payment-link")
    assert retry.status_code == 200
    assert retry.json()["payment_url"] == "https://pm.link/clinic/test/99"


def test_payment_link_requires_verified_email(client, make_appointment, gateway):
    appointment = make_appointment()

    response = client.post(f"/api/appointment/{appointment.id}/payment-link")

    assert response.status_code == 409
    gateway.create_link.assert_not_awaited()


def test_payment_link_reuses_existing_link(client, make_appointment, gateway):
    appointment = make_appointment(
        email_verified=True,
        payment_id="link_1",
        payment_url="https://pm.link/clinic/test/1",
        payment_status="pending",
    )

    response = client.post(f"/api/appointment/{appointment.id}/payment-link")

    assert response.status_code == 200
    assert response.json()["payment_url"] == "https://pm.link/clinic/test/1"
    gateway.create_link.assert_not_awaited()


def test_public_view_shows_payment_metadata_once_paid(client, make_appointment):
    pending = make_appointment(
        email_verified=True, payment_id="link_1", payment_url="u1", payment_status="pending"
    )
    paid = make_appointment(
        email="paid@example.com",
        email_verified=True,
        payment_id="link_2",
        payment_url="u2",
        payment_status="succeeded",
    )

    pending_view = client.get(f"/api/appointment/{pending.id}").json()["appointment"]
    paid_view = client.get(f"/api/appointment/{paid.id}").json()["appointment"]

    assert "payment_id" not in pending_view
    assert paid_view["payment_id"] == "link_2"
    assert paid_view["payment_status"] == "succeeded"


def test_unknown_appointment(client):
    response = client.get("/api/appointment/4040")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Appointment not found"}


def test_standalone_payment_link(client, gateway):
    gateway.create_link.return_value = PaymentLink("link_5", "https://pm.link/clinic/test/5")

    response = client.post(
        "/api/payment/create-payment-link",
        json={"amount": "1499.50", "description": "Annual Physical Exam"},
    )

    assert response.status_code == 200
    assert response.json()["data"] == {
        "payment_id": "link_5",
        "payment_url": "https://pm.link/clinic/test/5",
    }
    assert gateway.create_link.await_args.kwargs["amount"] == Decimal("1499.50")


def test_standalone_payment_link_rejects_non_positive_amount(client, gateway):
    response = client.post(
        "/api/payment/create-payment-link", json={"amount": 0, "description": "Nothing"}
    )

    assert response.status_code == 422
    gateway.create_link.assert_not_awaited()


def test_submit_normalizes_contact_number(client, db_session, procedure):
    response = client.post(
        "/api/appointment/submit-appointment",
        json=submission(procedure.id, contact_no="0912 345 6789"),
    )

    assert response.status_code == 201
    appointment = db_session.get(Appointment, response.json()["appointment_id"])
    assert appointment.basic_info.contact_no == "+639123456789"


def test_submit_rejects_invalid_contact_number(client, procedure, sent_emails):
    response = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id, contact_no="12345")
    )

    assert response.status_code == 422
    sent_emails.assert_not_awaited()


def test_confirm_non_ascii_code_is_rejected(client, db_session, procedure, gateway, fixed_code):
    appointment_id = client.post(
        "/api/appointment/submit-appointment", json=submission(procedure.id)
    ).json()["appointment_id"]

    response = client.post(
        f"/api/appointment/{appointment_id}/confirm-email", json={"code": "４８２９１３"}
    )

    assert response.status_code == 400
    gateway.create_link.assert_not_awaited()
    assert db_session.get(Appointment, appointment_id).email_verified is False


def test_confirm_already_verified_ignores_code(client, make_appointment, gateway):
    appointment = make_appointment(
        email_verified=True,
        payment_id="link_1",
        payment_url="https://pm.link/clinic/test/1",
        payment_status="pending",
    )

    response = client.post(
        f"/api/appointment/{appointment.id}/confirm-email", json={"code": "000000"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Email already verified"
    assert body["email_verified"] is True
    assert "payment_url" not in body
    assert body["appointment"]["payment_url"] == "https://pm.link/clinic/test/1"
    gateway.create_link.assert_not_awaited()


def test_confirm_already_verified_without_link_does_not_create_one(
    client, make_appointment, gateway
):
    appointment = make_appointment(email_verified=True)

    response = client.post(
        f"/api/appointment/{appointment.id}/confirm-email", json={"code": "123456"}
    )

    assert response.json()["message"] == "Email already verified"
    gateway.create_link.assert_not_awaited()
