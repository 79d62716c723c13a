"""Billing Routes — plan summary, checkout order creation and payment verification.

Invariants:
    - Only a signature that verifies reaches EntitlementGate.apply_verified_payment
    - Order creation never changes the plan
"""

import logging
import time

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskshare.api.dependencies import (
    get_current_user, get_payment_verifier, get_razorpay_client,
)
from taskshare.config import Settings, get_settings
from taskshare.core.errors import ErrorContext, PaymentVerificationError
from taskshare.infrastructure.database import get_db
from taskshare.infrastructure.payment_gateway import (
    RazorpayClient, RazorpaySignatureVerifier,
)
from taskshare.models.user import User
from taskshare.schemas.billing import OrderResponse, PaymentVerification, PlanResponse
from taskshare.services.entitlement_gate import EntitlementGate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/billing", tags=["billing"])


@router.get("/plan", response_model=PlanResponse)
async def get_plan(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return PlanResponse(**await EntitlementGate(db).plan_summary(user))


@router.post(
    "/orders", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    user: User = Depends(get_current_user),
    client: RazorpayClient = Depends(get_razorpay_client),
    settings: Settings = Depends(get_settings),
):
    receipt = f"rcpt_{user.id.hex[:16]}_{int(time.time())}"
    order = await client.create_order(
        settings.upgrade_amount_paise, settings.upgrade_currency, receipt,
    )
    return OrderResponse(
        order_id=order["id"],
        amount=order.get("amount", settings.upgrade_amount_paise),
        currency=order.get("currency", settings.upgrade_currency),
        key_id=client.key_id,
    )


@router.post("/verify", response_model=PlanResponse)
async def verify_payment(
    body: PaymentVerification,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    verifier: RazorpaySignatureVerifier = Depends(get_payment_verifier),
):
    if not verifier.verify(
        body.razorpay_order_id, body.razorpay_payment_id, body.razorpay_signature,
    ):
        raise PaymentVerificationError(ErrorContext(actor=user.email))

    gate = EntitlementGate(db)
    upgraded = await gate.apply_verified_payment(user.email)
    logger.info(
        "Payment verified",
        extra={"actor": user.email, "order_id": body.razorpay_order_id},
    )
    return PlanResponse(**await gate.plan_summary(upgraded))
