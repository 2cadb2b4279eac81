"""
PayMongo Webhook Handler
Marks appointments paid when their payment link is settled
"""

import logging

from fastapi import APIRouter, Depends, Request

from ..domain.appointments import AppointmentService, get_appointment_service
from ..services.paymongo_service import (
    LINK_PAYMENT_PAID,
    extract_link_id,
    parse_webhook_event,
    verify_webhook_signature,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["webhooks"])


@router.post("/webhook")
async def handle_paymongo_webhook(
    request: Request,
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Handle PayMongo webhook events

    Events handled:
    - link.payment.paid - flips the matching appointment to succeeded and
      emails the confirmation

    Always acknowledges with 200; PayMongo retries anything else, so
    internal failures are only logged.
    """
    try:
        body = await request.body()

        if not verify_webhook_signature(body, request.headers.get("paymongo-signature")):
            logger.error("❌ Invalid PayMongo webhook signature")
            return {"received": True, "status": "ignored"}

        try:
            event = parse_webhook_event(body)
        except ValueError as e:
            logger.error(f"❌ Invalid webhook payload: {e}")
            return {"received": True, "status": "ignored"}

        event_type = event.get("type")
        logger.info(f"📥 Received PayMongo webhook: {event_type}")

        if event_type != LINK_PAYMENT_PAID:
            logger.info(f"ℹ️ Unhandled event type: {event_type}")
            return {"received": True, "status": "ignored", "event_type": event_type}

        link_id = extract_link_id(event)
        if not link_id:
            logger.warning("⚠️ No link ID in webhook payload")
            return {"received": True, "status": "ignored", "event_type": event_type}

        matched = await service.reconcile_paid_link(link_id)
        return {
            "received": True,
            "status": "processed" if matched else "no_match",
            "event_type": event_type,
        }

    except Exception as e:
        logger.error(f"❌ Webhook processing error: {str(e)}")
        logger.exception("Full webhook error traceback:")
        return {"received": True, "status": "error"}
