import os
import tempfile

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ["PAYMENT_DELAY_SECONDS"] = "0"
os.environ["REFUND_DELAY_SECONDS"] = "0"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="ngohub-uploads-")

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from ngohub.core.dependencies import (
    get_dynamo_table,
    get_file_storage,
    get_notification_service,
    get_payment_service,
)
from ngohub.core.security import create_access_token, hash_password
from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.data_access.schema import create_table
from ngohub.models.campaign import Campaign
from ngohub.models.user import User
from ngohub.services.notification_service import NotificationService
from ngohub.services.payment_service import MockPaymentService
from ngohub.services.storage_service import FileStorage

TABLE_NAME = "ngohub-test"


class RecordingNotificationService(NotificationService):
    """Keeps every outgoing notification instead of sending it."""

    def __init__(self):
        super().__init__(client=None, from_email="ngohub@example.com", enabled=False)
        self.sent = []

    def send_notification(self, email_to, subject, body_html):
        self.sent.append((email_to, subject, body_html))
        return True

    def subjects_for(self, email_to):
        return [subject for to, subject, _ in self.sent if to == email_to]


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def dynamodb(aws):
    return boto3.resource("dynamodb", region_name="us-east-1")


@pytest.fixture
def data_access(dynamodb):
    return DynamoDataAccess(create_table(dynamodb, TABLE_NAME))


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest.fixture
def payments():
    # Approves every charge; tests flip success_rate to 0.0 to force a decline.
    return MockPaymentService(success_rate=1.0, delay_seconds=0, refund_delay_seconds=0)


@pytest.fixture
def storage(tmp_path):
    return FileStorage(upload_dir=str(tmp_path / "uploads"), max_bytes=1024)


def make_user(data_access, name="Rajesh Kumar", email="rajesh@example.com",
              password="password123", role="user"):
    return data_access.create_user(User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role
    ))


def make_campaign(data_access, creator, **overrides):
    fields = dict(
        title="Help Rahul Fight Cancer",
        description="Chemotherapy for a 12 year old",
        story="Rahul was diagnosed six months ago.",
        target_amount=100000,
        raised_amount=0,
        category="Medical",
        creator_id=creator.user_id,
        status="active",
    )
    fields.update(overrides)
    return data_access.create_campaign(Campaign(**fields))


@pytest.fixture
def creator(data_access):
    return make_user(data_access)


@pytest.fixture
def admin(data_access):
    return make_user(data_access, name="Admin User", email="admin@ngohub.org",
                     password="admin123", role="admin")


@pytest.fixture
def campaign(data_access, creator):
    return make_campaign(data_access, creator)


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user.user_id, user.email)}"}


@pytest.fixture
def client(data_access, notifications, payments, storage):
    from ngohub.api.main import app

    app.dependency_overrides[get_dynamo_table] = lambda: data_access
    app.dependency_overrides[get_notification_service] = lambda: notifications
    app.dependency_overrides[get_payment_service] = lambda: payments
    app.dependency_overrides[get_file_storage] = lambda: storage
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
