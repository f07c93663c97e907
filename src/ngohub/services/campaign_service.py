import logging
import math
from datetime import timedelta
from pydantic import BaseModel

from ngohub.core.errors import NotFoundError, ValidationError
from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.models.campaign import Campaign, PatientInfo, DEFAULT_DURATION_DAYS
from ngohub.models.common import utcnow
from ngohub.models.donation import Donation
from ngohub.models.user import User
from ngohub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

RECENT_DONATIONS_LIMIT = 10
ALL_CATEGORIES = "All"


class CampaignView(BaseModel):
    campaign: Campaign
    creator: User | None = None
    donor_count: int = 0
    recent_donations: list[Donation] | None = None


class CampaignPage(BaseModel):
    campaigns: list[CampaignView]
    current: int
    pages: int
    total: int


class CampaignService:
    def __init__(self, data_access: DynamoDataAccess, notification_service: NotificationService):
        self.data_access = data_access
        self.notification_service = notification_service

    def list_campaigns(self, category: str | None = None, status: str | None = None,
                       search: str | None = None, page: int = 1, limit: int = 10) -> CampaignPage:
        if category == ALL_CATEGORIES:
            category = None

        matches = self.data_access.list_campaigns(category=category, status=status, search=search)
        start = (page - 1) * limit
        window = matches[start:start + limit]

        creators: dict[str, User | None] = {}
        views = []
        for campaign in window:
            if campaign.creator_id not in creators:
                creators[campaign.creator_id] = self.data_access.get_user(campaign.creator_id)
            views.append(CampaignView(
                campaign=campaign,
                creator=creators[campaign.creator_id],
                donor_count=self.data_access.count_campaign_donations(campaign.campaign_id)
            ))

        total = len(matches)
        return CampaignPage(
            campaigns=views,
            current=page,
            pages=math.ceil(total / limit),
            total=total
        )

    def get_campaign(self, campaign_id: str) -> CampaignView:
        campaign = self.data_access.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError("Campaign not found")

        return CampaignView(
            campaign=campaign,
            creator=self.data_access.get_user(campaign.creator_id),
            donor_count=self.data_access.count_campaign_donations(campaign_id),
            recent_donations=self.data_access.list_campaign_donations(
                campaign_id, status="completed", limit=RECENT_DONATIONS_LIMIT
            )
        )

    def create_campaign(
        self,
        creator_id: str,
        title: str,
        description: str,
        story: str,
        target_amount: float,
        category: str,
        beneficiary: str | None = None,
        patient_info: PatientInfo | None = None,
        images: list[str] | None = None,
        documents: list[str] | None = None,
        duration: int | None = None,
        city: str | None = None
    ) -> Campaign:
        creator = self.data_access.get_user(creator_id)
        if creator is None:
            raise NotFoundError("User not found")
        if target_amount is None or target_amount <= 0:
            raise ValidationError("Target amount must be a positive number")

        duration = duration or DEFAULT_DURATION_DAYS
        now = utcnow()
        campaign = self.data_access.create_campaign(Campaign(
            title=title,
            description=description,
            story=story,
            target_amount=target_amount,
            category=category,
            creator_id=creator_id,
            beneficiary=beneficiary,
            patient_info=patient_info,
            images=images or [],
            documents=documents or [],
            duration=duration,
            end_date=now + timedelta(days=duration),
            location=city,
            created_at=now,
            updated_at=now
        ))
        logger.info(f"Campaign {campaign.campaign_id} submitted for review.",
                    extra={"campaign_id": campaign.campaign_id, "user_id": creator_id})

        self.notification_service.send_campaign_submitted(creator.email, campaign.title)
        return campaign
