import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..services.paymongo_service import PayMongoService, get_paymongo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["payments"])


class CreatePaymentLinkRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)  # Major currency units
    description: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None


@router.post("/create-payment-link")
async def create_payment_link(
    request: CreatePaymentLinkRequest,
    gateway: PayMongoService = Depends(get_paymongo_service),
):
    """Create a standalone PayMongo payment link"""
    link = await gateway.create_link(
        amount=request.amount,
        description=request.description,
        name=request.name or "Patient",
        email=request.email or "patient@example.com",
    )
    return {
        "success": True,
        "message": "Payment link created successfully",
        "data": {"payment_id": link.payment_id, "payment_url": link.payment_url},
    }
