import boto3
from botocore.config import Config
from fastapi import Depends
from functools import lru_cache

from ngohub.core.config import settings
from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.services.admin_service import AdminService
from ngohub.services.auth_service import AuthService
from ngohub.services.campaign_service import CampaignService
from ngohub.services.donation_service import DonationService
from ngohub.services.notification_service import NotificationService
from ngohub.services.payment_service import MockPaymentService
from ngohub.services.resource_service import ResourceService
from ngohub.services.storage_service import FileStorage


@lru_cache()
def get_boto_session() -> boto3.Session:
    return boto3.Session(
        region_name=settings.AWS_REGION,
        profile_name=settings.AWS_PROFILE
    )

@lru_cache()
def get_dynamodb_resource():
    session = get_boto_session()
    return session.resource('dynamodb', endpoint_url=settings.DYNAMODB_ENDPOINT_URL)

@lru_cache()
def get_dynamo_table() -> DynamoDataAccess:
    table = get_dynamodb_resource().Table(settings.DYNAMODB_TABLE_NAME)
    return DynamoDataAccess(table=table)

@lru_cache()
def get_notification_service() -> NotificationService:
    session = get_boto_session()
    sqs_client = session.client('sqs') if settings.NOTIFICATION_QUEUE_URL else None
    # One attempt per call with short timeouts; NotificationService owns the retries.
    ses_config = Config(
        connect_timeout=settings.SES_CONNECT_TIMEOUT_SECONDS,
        read_timeout=settings.SES_READ_TIMEOUT_SECONDS,
        retries={"total_max_attempts": 1}
    )
    return NotificationService(
        client=session.client('ses', config=ses_config),
        from_email=settings.SES_FROM_EMAIL,
        enabled=settings.EMAIL_DELIVERY_ENABLED,
        sqs_client=sqs_client,
        queue_url=settings.NOTIFICATION_QUEUE_URL,
        max_delay_seconds=settings.NOTIFICATION_MAX_DELAY_SECONDS
    )

@lru_cache()
def get_payment_service() -> MockPaymentService:
    return MockPaymentService(
        success_rate=settings.PAYMENT_SUCCESS_RATE,
        delay_seconds=settings.PAYMENT_DELAY_SECONDS,
        refund_delay_seconds=settings.REFUND_DELAY_SECONDS
    )

@lru_cache()
def get_file_storage() -> FileStorage:
    return FileStorage(upload_dir=settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_BYTES)

# Services are assembled per request from the cached collaborators, so tests
# can swap a collaborator through app.dependency_overrides.

def get_donation_service(
    data_access: DynamoDataAccess = Depends(get_dynamo_table),
    payment_service: MockPaymentService = Depends(get_payment_service),
    notification_service: NotificationService = Depends(get_notification_service)
) -> DonationService:
    return DonationService(
        data_access=data_access,
        payment_service=payment_service,
        notification_service=notification_service,
        max_amount=settings.MAX_DONATION_AMOUNT
    )

def get_campaign_service(
    data_access: DynamoDataAccess = Depends(get_dynamo_table),
    notification_service: NotificationService = Depends(get_notification_service)
) -> CampaignService:
    return CampaignService(data_access, notification_service)

def get_resource_service(data_access: DynamoDataAccess = Depends(get_dynamo_table)) -> ResourceService:
    return ResourceService(data_access)

def get_auth_service(
    data_access: DynamoDataAccess = Depends(get_dynamo_table),
    notification_service: NotificationService = Depends(get_notification_service)
) -> AuthService:
    return AuthService(data_access, notification_service)

def get_admin_service(
    data_access: DynamoDataAccess = Depends(get_dynamo_table),
    notification_service: NotificationService = Depends(get_notification_service)
) -> AdminService:
    return AdminService(data_access, notification_service)
