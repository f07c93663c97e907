import logging
from pydantic import BaseModel

from ngohub.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.models.campaign import CAMPAIGN_STATUSES, Campaign
from ngohub.models.donation import Donation
from ngohub.models.user import User
from ngohub.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class DashboardStats(BaseModel):
    total_campaigns: int
    active_campaigns: int
    total_donations: int
    total_users: int
    total_amount_raised: float


class Dashboard(BaseModel):
    stats: DashboardStats
    recent_campaigns: list[tuple[Campaign, User | None]]
    recent_donations: list[tuple[Donation, Campaign | None]]


class AdminService:
    def __init__(self, data_access: DynamoDataAccess, notification_service: NotificationService):
        self.data_access = data_access
        self.notification_service = notification_service

    def require_admin(self, user_id: str) -> User:
        user = self.data_access.get_user(user_id)
        if user is None or not user.is_admin:
            raise PermissionDeniedError("Admin access required")
        return user

    def dashboard(self) -> Dashboard:
        completed = self.data_access.list_donations(status="completed")
        pending = self.data_access.list_campaigns(status="pending")[:5]

        campaign_cache: dict[str, Campaign | None] = {}
        recent_donations = []
        for donation in completed[:10]:
            if donation.campaign_id not in campaign_cache:
                campaign_cache[donation.campaign_id] = self.data_access.get_campaign(donation.campaign_id)
            recent_donations.append((donation, campaign_cache[donation.campaign_id]))

        return Dashboard(
            stats=DashboardStats(
                total_campaigns=self.data_access.count_campaigns(),
                active_campaigns=self.data_access.count_campaigns(status="active"),
                total_donations=len(completed),
                total_users=self.data_access.count_users(),
                total_amount_raised=sum(d.amount for d in completed)
            ),
            recent_campaigns=[(c, self.data_access.get_user(c.creator_id)) for c in pending],
            recent_donations=recent_donations
        )

    def update_campaign_status(self, campaign_id: str, status: str) -> tuple[Campaign, User | None]:
        if status not in CAMPAIGN_STATUSES:
            raise ValidationError(f"Invalid status '{status}'")

        campaign = self.data_access.update_campaign_status(campaign_id, status)
        if campaign is None:
            raise NotFoundError("Campaign not found")

        logger.info(f"Campaign {campaign_id} moved to {status}", extra={"campaign_id": campaign_id})
        creator = self.data_access.get_user(campaign.creator_id)
        if creator:
            self.notification_service.send_campaign_status_update(creator.email, campaign.title, status)
        return campaign, creator
