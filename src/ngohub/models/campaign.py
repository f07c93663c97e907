import math
from datetime import datetime, timedelta
from pydantic import BaseModel, Field
from typing import Literal

from ngohub.models.common import new_id, utcnow


CampaignStatus = Literal["draft", "pending", "active", "completed", "suspended"]

CAMPAIGN_STATUSES: tuple[str, ...] = ("draft", "pending", "active", "completed", "suspended")

DEFAULT_DURATION_DAYS = 30

class PatientInfo(BaseModel):
    name: str | None = None
    age: str | None = None
    condition: str | None = None
    hospital: str | None = None
    city: str | None = None

class Campaign(BaseModel):
    campaign_id: str = Field(default_factory=new_id)
    title: str
    description: str
    story: str
    target_amount: float = Field(gt=0)
    raised_amount: float = Field(default=0, ge=0)
    category: str
    creator_id: str
    beneficiary: str | None = None
    patient_info: PatientInfo | None = None
    images: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    status: CampaignStatus = "pending"
    duration: int = DEFAULT_DURATION_DAYS
    end_date: datetime | None = None
    location: str | None = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def progress(self) -> float:
        """Share of the target raised so far. Not clamped: overfunded campaigns exceed 1."""
        return self.raised_amount / self.target_amount

    def effective_end_date(self) -> datetime:
        if self.end_date is not None:
            return self.end_date
        return self.created_at + timedelta(days=self.duration)

    def days_left(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        remaining = (self.effective_end_date() - now) / timedelta(days=1)
        return max(0, math.ceil(remaining))
