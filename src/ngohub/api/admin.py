from fastapi import APIRouter, Depends

from ngohub.api.auth import TokenUser, get_current_user, to_http_exception
from ngohub.api.schemas import (
    AdminDonationResponse,
    CampaignRef,
    CampaignResponse,
    CampaignStatusRequest,
    CampaignStatusResponse,
    DashboardResponse,
    DashboardStatsResponse,
)
from ngohub.core.dependencies import get_admin_service
from ngohub.core.errors import NgoHubError
from ngohub.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


def require_admin(
    user: TokenUser = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> TokenUser:
    try:
        admin_service.require_admin(user.user_id)
    except NgoHubError as e:
        raise to_http_exception(e)
    return user


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    _: TokenUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    data = admin_service.dashboard()
    return DashboardResponse(
        stats=DashboardStatsResponse(**data.stats.model_dump()),
        recent_campaigns=[
            CampaignResponse.from_campaign(campaign, creator=creator, include_email=True)
            for campaign, creator in data.recent_campaigns
        ],
        recent_donations=[
            AdminDonationResponse(
                id=donation.donation_id,
                campaign=CampaignRef.from_campaign(campaign),
                donor_name=donation.donor_name,
                amount=donation.amount,
                payment_method=donation.payment_method,
                transaction_id=donation.transaction_id,
                created_at=donation.created_at
            )
            for donation, campaign in data.recent_donations
        ]
    )


@router.put("/campaigns/{campaign_id}/status", response_model=CampaignStatusResponse)
def update_campaign_status(
    campaign_id: str,
    body: CampaignStatusRequest,
    _: TokenUser = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    try:
        campaign, creator = admin_service.update_campaign_status(campaign_id, body.status)
    except NgoHubError as e:
        raise to_http_exception(e)

    return CampaignStatusResponse(
        message="Campaign status updated",
        campaign=CampaignResponse.from_campaign(campaign, creator=creator, include_email=True)
    )
