from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from clinic_api.domain.appointments.service import build_confirmation_data, format_price
from clinic_api.email_templates import (
    appointment_confirmation_template,
    verification_code_template,
)


def test_verification_template_contains_code_and_expiry():
    mjml = verification_code_template("482913", expires_in_minutes=5)

    assert mjml.strip().startswith("<mjml>")
    assert "482913" in mjml
    assert "expire in 5 minutes" in mjml


def test_confirmation_template_escapes_patient_text():
    mjml = appointment_confirmation_template(
        {"fullName": "Eleanor <b>Agapito</b>", "procedure": "Total Cholesterol", "address": None}
    )

    assert "Eleanor &lt;b&gt;Agapito&lt;/b&gt;" in mjml
    assert "<b>Agapito</b>" not in mjml
    assert "Total Cholesterol" in mjml
    assert "<strong>Address:</strong> -" in mjml


def test_format_price():
    assert format_price(Decimal("1499.5")) == "PHP 1,499.50"
    assert format_price(None) is None


def test_build_confirmation_data():
    appointment = SimpleNamespace(
        basic_info=SimpleNamespace(
            full_name="Eleanor Agapito",
            sex="Female",
            email="eleanor@example.com",
            date_of_birth=date(1960, 1, 1),
            contact_no="+639123456789",
            address="Batangas City",
        ),
        procedure=SimpleNamespace(
            name="Total Cholesterol",
            price=Decimal("300.00"),
            service=SimpleNamespace(name="Blood Chemistry"),
        ),
        reason="For Job Requirements",
        appointment_time="8:00 AM - 9:00 AM",
        appointment_date=date(2025, 4, 24),
    )

    data = build_confirmation_data(appointment)

    assert data == {
        "fullName": "Eleanor Agapito",
        "gender": "Female",
        "email": "eleanor@example.com",
        "dateOfBirth": "January 01, 1960",
        "contactNo": "+639123456789",
        "address": "Batangas City",
        "reason": "For Job Requirements",
        "service": "Blood Chemistry",
        "procedure": "Total Cholesterol",
        "price": "PHP 300.00",
        "time": "8:00 AM - 9:00 AM",
        "date": "April 24, 2025",
    }
