from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from ngohub.models.campaign import Campaign, CampaignStatus, PatientInfo
from ngohub.models.donation import Donation
from ngohub.models.resource import Resource, ResourceContact, ResourceLocation
from ngohub.models.user import User
from ngohub.services.campaign_service import CampaignView


class CamelModel(BaseModel):
    """JSON uses camelCase keys; Python code keeps snake_case names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    current: int
    pages: int
    total: int

# --- auth ---

class RegisterRequest(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone: Optional[str] = None

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class UserResponse(CamelModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.user_id, name=user.name, email=user.email, phone=user.phone, role=user.role)

class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse

# --- donations ---

class DonationRequest(CamelModel):
    campaign_id: str
    donor_name: str = Field(min_length=1)
    donor_email: EmailStr
    amount: float = Field(gt=0, allow_inf_nan=False)
    payment_method: Optional[str] = None
    message: Optional[str] = None
    is_anonymous: bool = False

class DonationSummary(CamelModel):
    id: str
    transaction_id: Optional[str] = None
    status: str
    amount: float

class DonationResponse(CamelModel):
    success: bool
    message: str
    donation: DonationSummary

class PublicDonationResponse(CamelModel):
    id: str
    donor_name: str
    amount: float
    is_anonymous: bool
    message: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_donation(cls, donation: Donation) -> "PublicDonationResponse":
        return cls(
            id=donation.donation_id,
            donor_name=donation.donor_name,
            amount=donation.amount,
            is_anonymous=donation.is_anonymous,
            message=donation.message,
            created_at=donation.created_at
        )

class CampaignRef(CamelModel):
    id: str
    title: str
    images: list[str] = []

    @classmethod
    def from_campaign(cls, campaign: Optional[Campaign]) -> Optional["CampaignRef"]:
        if campaign is None:
            return None
        return cls(id=campaign.campaign_id, title=campaign.title, images=campaign.images)

class UserDonationResponse(CamelModel):
    id: str
    campaign_id: str
    campaign: Optional[CampaignRef] = None
    donor_id: Optional[str] = None
    donor_name: str
    donor_email: EmailStr
    amount: float
    payment_method: Optional[str] = None
    payment_status: str
    payment_id: Optional[str] = None
    transaction_id: Optional[str] = None
    is_anonymous: bool
    message: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def from_donation(cls, donation: Donation, campaign: Optional[Campaign] = None) -> "UserDonationResponse":
        return cls(
            id=donation.donation_id,
            campaign=CampaignRef.from_campaign(campaign),
            **donation.model_dump(exclude={"donation_id"})
        )

# --- campaigns ---

class CreatorResponse(CamelModel):
    id: str
    name: str
    email: Optional[EmailStr] = None

class CampaignResponse(CamelModel):
    id: str
    title: str
    description: str
    story: str
    target_amount: float
    raised_amount: float
    category: str
    creator_id: str
    creator: Optional[CreatorResponse] = None
    beneficiary: Optional[str] = None
    patient_info: Optional[PatientInfo] = None
    images: list[str]
    documents: list[str]
    status: CampaignStatus
    duration: int
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    progress: float
    days_left: int
    donor_count: Optional[int] = None

    @classmethod
    def from_campaign(cls, campaign: Campaign, creator: Optional[User] = None,
                      donor_count: Optional[int] = None, include_email: bool = False, **extra):
        data = campaign.model_dump(exclude={"campaign_id"})
        return cls(
            id=campaign.campaign_id,
            creator=CreatorResponse(
                id=creator.user_id,
                name=creator.name,
                email=creator.email if include_email else None
            ) if creator else None,
            progress=campaign.progress,
            days_left=campaign.days_left(),
            donor_count=donor_count,
            **data,
            **extra
        )

class CampaignDetailResponse(CampaignResponse):
    recent_donations: list[PublicDonationResponse] = []

    @classmethod
    def from_view(cls, view: CampaignView) -> "CampaignDetailResponse":
        return cls.from_campaign(
            view.campaign,
            creator=view.creator,
            donor_count=view.donor_count,
            include_email=True,
            recent_donations=[
                PublicDonationResponse.from_donation(d) for d in (view.recent_donations or [])
            ]
        )

class CampaignListResponse(CamelModel):
    campaigns: list[CampaignResponse]
    pagination: Pagination

class CampaignCreatedResponse(CamelModel):
    message: str
    campaign: CampaignResponse

class CampaignStatusRequest(CamelModel):
    status: CampaignStatus

class CampaignStatusResponse(CamelModel):
    message: str
    campaign: CampaignResponse

# --- resources ---

class ResourceResponse(CamelModel):
    id: str
    name: str
    category: str
    type: Optional[str] = None
    description: Optional[str] = None
    location: ResourceLocation
    contact: ResourceContact
    specializations: list[str]
    facilities: list[str]
    working_hours: Optional[str] = None
    is_verified: bool
    created_at: datetime

    @classmethod
    def from_resource(cls, resource: Resource) -> "ResourceResponse":
        return cls(id=resource.resource_id, **resource.model_dump(exclude={"resource_id"}))

class ResourceListResponse(CamelModel):
    resources: list[ResourceResponse]
    pagination: Pagination

# --- admin ---

class DashboardStatsResponse(CamelModel):
    total_campaigns: int
    active_campaigns: int
    total_donations: int
    total_users: int
    total_amount_raised: float

class AdminDonationResponse(CamelModel):
    id: str
    campaign: Optional[CampaignRef] = None
    donor_name: str
    amount: float
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    created_at: datetime

class DashboardResponse(CamelModel):
    stats: DashboardStatsResponse
    recent_campaigns: list[CampaignResponse]
    recent_donations: list[AdminDonationResponse]

# --- misc ---

class UploadResponse(CamelModel):
    message: str
    filename: str
    original_name: str
    size: int
    url: str

class HealthResponse(CamelModel):
    status: str
    timestamp: datetime
    uptime: float

