import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Admin bearer tokens expire after 12 hours by default
ADMIN_TOKEN_MAX_AGE_SECONDS = int(os.getenv("ADMIN_TOKEN_MAX_AGE_SECONDS", "43200"))

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000,https://st-rupert-clinic-appointment-system.vercel.app",
).split(",")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "St. Rupert's Medical Clinic <noreply@strupertclinic.com>"
)
CLINIC_NAME = os.getenv("CLINIC_NAME", "St. Rupert's Medical Clinic")
CLINIC_CONTACT_NO = os.getenv("CLINIC_CONTACT_NO", "+639123456789")

# PayMongo Configuration
PAYMONGO_SECRET_KEY = os.getenv("PAYMONGO_SECRET_KEY")
# Webhook signing secret from the PayMongo dashboard (whsk_...)
PAYMONGO_WEBHOOK_SECRET = os.getenv("PAYMONGO_WEBHOOK_SECRET")
PAYMONGO_API_URL = os.getenv("PAYMONGO_API_URL", "https://api.paymongo.com/v1")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "PHP")
PAYMENT_REMARKS = os.getenv("PAYMENT_REMARKS", f"{CLINIC_NAME} Appointment")

# Outbound HTTP calls (payment gateway)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))

# Email verification codes
VERIFICATION_CODE_TTL_SECONDS = int(os.getenv("VERIFICATION_CODE_TTL_SECONDS", "300"))
VERIFICATION_SWEEP_INTERVAL_SECONDS = int(os.getenv("VERIFICATION_SWEEP_INTERVAL_SECONDS", "600"))
