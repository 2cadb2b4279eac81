"""
Verification code delivery
Issues a code in the store and emails it; the code never leaves this module
"""

import logging

from .. import email_service
from ..exceptions import EmailTransportError
from ..verification_store import VerificationStore

logger = logging.getLogger(__name__)


async def send_verification_code(store: VerificationStore, email: str) -> dict:
    """
    Issue a fresh code for email and deliver it.

    The issued code is discarded again when delivery fails, so a patient can
    never be left holding a code they did not receive.
    """
    logger.info(f"📨 Verification code requested for {email}")
    code = store.issue(email)

    try:
        response = await email_service.send_verification_code_email(to=email, verification_code=code)
    except EmailTransportError:
        store.discard(email)
        logger.exception(f"❌ Failed to send verification code to {email}")
        raise
    except Exception as e:
        store.discard(email)
        logger.exception(f"❌ Unexpected error sending verification code to {email}")
        raise EmailTransportError(f"Failed to send verification code: {str(e)}") from e

    logger.info(f"✅ Verification code sent to {email}")
    return response
