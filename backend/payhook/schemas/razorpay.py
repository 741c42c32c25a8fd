from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from payhook.core.errors import PayloadValidationError


class PaymentEntity(BaseModel, extra="ignore"):
    id: str | None = Field(None, description="Razorpay payment ID")
    amount: Any = Field(None, description="Amount in minor units (paise)")
    currency: str | None = None
    notes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("notes", mode="before")
    @classmethod
    def empty_notes(cls, value: Any) -> Any:
        # Razorpay sends [] rather than {} for a payment without notes
        if value is None or value == []:
            return {}
        return value


class PaymentWrapper(BaseModel, extra="ignore"):
    entity: PaymentEntity


class PaymentPayload(BaseModel, extra="ignore"):
    payment: PaymentWrapper


class RazorpayWebhook(BaseModel, extra="ignore"):
    event: str | None = Field(None, description="Event name, e.g. payment.captured")
    payload: PaymentPayload

    def to_notification(self) -> "PaymentNotification":
        entity = self.payload.payment.entity

        device = entity.notes.get("device")
        # Notes values are free-form, so a numeric ID is kept as its string form
        if isinstance(device, (int, float)) and not isinstance(device, bool) and device:
            device = str(device)
        if not isinstance(device, str) or not device:
            raise PayloadValidationError("No device ID found")

        amount = entity.amount
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise PayloadValidationError("No valid payment amount found")

        return PaymentNotification(amount_minor_units=amount, device_id=device)


class PaymentNotification(BaseModel):
    amount_minor_units: int
    device_id: str

    @property
    def amount(self) -> Decimal:
        """Amount in major units (rupees for INR)."""
        return Decimal(self.amount_minor_units) / 100


class ForwardRecord(BaseModel):
    timestamp: int = Field(..., description="Epoch milliseconds")
    value: Decimal

    @field_serializer("value")
    def value_as_number(self, value: Decimal) -> int | float:
        if value == value.to_integral_value():
            return int(value)
        return float(value)
