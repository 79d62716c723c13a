"""Billing Schemas — plan summary and Razorpay checkout round-trip."""

from pydantic import BaseModel, Field


class PlanResponse(BaseModel):
    plan: str
    owned_tasks: int
    task_quota: int | None
    remaining_task_slots: int | None
    can_share_as_editor: bool


class OrderResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    key_id: str


class PaymentVerification(BaseModel):
    razorpay_order_id: str = Field(min_length=1, max_length=100)
    razorpay_payment_id: str = Field(min_length=1, max_length=100)
    razorpay_signature: str = Field(min_length=1, max_length=256)
