from datetime import datetime
from pydantic import BaseModel, Field, EmailStr, model_validator
from typing import Literal

from ngohub.models.common import new_id, utcnow


PaymentStatus = Literal["pending", "processing", "completed", "failed", "refunded"]

ANONYMOUS_DONOR = "Anonymous"

class Donation(BaseModel):
    donation_id: str = Field(default_factory=new_id)
    campaign_id: str
    donor_id: str | None = None
    donor_name: str
    donor_email: EmailStr

    amount: float = Field(gt=0)
    payment_method: str = "card"
    payment_status: PaymentStatus = "pending"
    payment_id: str | None = None
    transaction_id: str | None = None

    is_anonymous: bool = False
    message: str | None = None

    created_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    @model_validator(mode="after")
    def _mask_anonymous_donor(self) -> "Donation":
        # The submitted name is dropped, not just hidden.
        if self.is_anonymous:
            self.donor_name = ANONYMOUS_DONOR
        return self
