from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status
)
from datetime import datetime, timezone
from typing import Optional
import logging
import time

from ngohub.api.auth import TokenUser, get_current_user, get_optional_user, to_http_exception
from ngohub.api.schemas import (
    CampaignCreatedResponse,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignResponse,
    DonationRequest,
    DonationResponse,
    DonationSummary,
    HealthResponse,
    Pagination,
    ResourceListResponse,
    ResourceResponse,
    UploadResponse,
    UserDonationResponse,
)
from ngohub.core.dependencies import (
    get_campaign_service,
    get_donation_service,
    get_file_storage,
    get_resource_service,
)
from ngohub.core.errors import NgoHubError, SettlementError
from ngohub.models.campaign import PatientInfo
from ngohub.services.campaign_service import CampaignService
from ngohub.services.donation_service import DonationService
from ngohub.services.resource_service import ResourceService
from ngohub.services.storage_service import FileStorage

router = APIRouter()
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()
MAX_IMAGES = 5
MAX_DOCUMENTS = 10


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=time.monotonic() - STARTED_AT
    )

# --- campaigns ---

@router.get("/campaigns", response_model=CampaignListResponse)
def list_campaigns(
    category: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    result = campaign_service.list_campaigns(
        category=category, status=status, search=search, page=page, limit=limit
    )
    return CampaignListResponse(
        campaigns=[
            CampaignResponse.from_campaign(v.campaign, creator=v.creator, donor_count=v.donor_count)
            for v in result.campaigns
        ],
        pagination=Pagination(current=result.current, pages=result.pages, total=result.total)
    )


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetailResponse)
def get_campaign(campaign_id: str, campaign_service: CampaignService = Depends(get_campaign_service)):
    try:
        view = campaign_service.get_campaign(campaign_id)
    except NgoHubError as e:
        raise to_http_exception(e)
    return CampaignDetailResponse.from_view(view)


@router.post("/campaigns", status_code=status.HTTP_201_CREATED, response_model=CampaignCreatedResponse)
def create_campaign(
    title: str = Form(...),
    description: str = Form(...),
    story: str = Form(...),
    target_amount: float = Form(..., alias="targetAmount", gt=0, allow_inf_nan=False),
    category: str = Form(...),
    beneficiary: Optional[str] = Form(None),
    patient_name: Optional[str] = Form(None, alias="patientName"),
    patient_age: Optional[str] = Form(None, alias="patientAge"),
    patient_condition: Optional[str] = Form(None, alias="patientCondition"),
    hospital: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    duration: Optional[int] = Form(None, gt=0),
    images: Optional[list[UploadFile]] = File(None),
    documents: Optional[list[UploadFile]] = File(None),
    user: TokenUser = Depends(get_current_user),
    campaign_service: CampaignService = Depends(get_campaign_service),
    storage: FileStorage = Depends(get_file_storage)
):
    images = images or []
    documents = documents or []
    if len(images) > MAX_IMAGES or len(documents) > MAX_DOCUMENTS:
        raise HTTPException(
            status_code=400,
            detail=f"At most {MAX_IMAGES} images and {MAX_DOCUMENTS} documents are allowed"
        )

    image_names: list[str] = []
    document_names: list[str] = []
    try:
        for f in images:
            image_names.append(storage.save("images", f.filename, f.content_type, f.file).filename)
        for f in documents:
            document_names.append(storage.save("documents", f.filename, f.content_type, f.file).filename)
        campaign = campaign_service.create_campaign(
            creator_id=user.user_id,
            title=title,
            description=description,
            story=story,
            target_amount=target_amount,
            category=category,
            beneficiary=beneficiary,
            patient_info=PatientInfo(
                name=patient_name,
                age=patient_age,
                condition=patient_condition,
                hospital=hospital,
                city=city
            ),
            images=image_names,
            documents=document_names,
            duration=duration,
            city=city
        )
    except NgoHubError as e:
        storage.delete(*image_names, *document_names)
        raise to_http_exception(e)
    except Exception:
        storage.delete(*image_names, *document_names)
        raise

    return CampaignCreatedResponse(
        message="Campaign created successfully",
        campaign=CampaignResponse.from_campaign(campaign)
    )

# --- donations ---

@router.post("/donations", response_model=DonationResponse)
def create_donation(
    body: DonationRequest,
    user: Optional[TokenUser] = Depends(get_optional_user),
    donation_service: DonationService = Depends(get_donation_service)
):
    """
    Records the donation, runs the payment and credits the campaign.
    A declined payment still answers 200 with `success: false`.
    """
    try:
        result = donation_service.submit_donation(
            campaign_id=body.campaign_id,
            donor_name=body.donor_name,
            donor_email=body.donor_email,
            amount=body.amount,
            payment_method=body.payment_method,
            message=body.message,
            is_anonymous=body.is_anonymous,
            donor_id=user.user_id if user else None
        )
    except SettlementError as e:
        logger.error(f"Donation error: {e}", extra={"stage": e.stage, "donation_id": e.donation_id})
        raise HTTPException(status_code=500, detail="Internal server error")
    except NgoHubError as e:
        raise to_http_exception(e)

    donation = result.donation
    return DonationResponse(
        success=result.success,
        message=result.message,
        donation=DonationSummary(
            id=donation.donation_id,
            transaction_id=donation.transaction_id,
            status=donation.payment_status,
            amount=donation.amount
        )
    )


@router.get("/donations/user/{user_id}", response_model=list[UserDonationResponse])
def get_user_donations(
    user_id: str,
    user: TokenUser = Depends(get_current_user),
    donation_service: DonationService = Depends(get_donation_service)
):
    return [
        UserDonationResponse.from_donation(donation, campaign)
        for donation, campaign in donation_service.list_user_donations(user_id)
    ]

# --- resources ---

@router.get("/resources/{category}", response_model=ResourceListResponse)
def list_resources(
    category: str,
    city: Optional[str] = None,
    type: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    resource_service: ResourceService = Depends(get_resource_service)
):
    result = resource_service.list_resources(
        category, city=city, resource_type=type, page=page, limit=limit
    )
    return ResourceListResponse(
        resources=[ResourceResponse.from_resource(r) for r in result.resources],
        pagination=Pagination(current=result.current, pages=result.pages, total=result.total)
    )

# --- uploads ---

@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: Optional[UploadFile] = File(None),
    storage: FileStorage = Depends(get_file_storage)
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    try:
        stored = storage.save("file", file.filename, file.content_type, file.file)
    except NgoHubError as e:
        raise to_http_exception(e)

    return UploadResponse(message="File uploaded successfully", **stored.model_dump())
