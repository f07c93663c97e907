import logging
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from datetime import datetime
from decimal import Decimal
from typing import Any

from ngohub.data_access.schema import (
    CAMPAIGN_DONATIONS_INDEX,
    DONOR_DONATIONS_INDEX,
    ENTITY_INDEX,
)
from ngohub.models.campaign import Campaign
from ngohub.models.common import utcnow
from ngohub.models.donation import Donation
from ngohub.models.resource import Resource
from ngohub.models.user import User

logger = logging.getLogger(__name__)

USER_PREFIX = "USER#"
EMAIL_PREFIX = "EMAIL#"
CAMPAIGN_PREFIX = "CAMPAIGN#"
DONATION_PREFIX = "DONATION#"
RESOURCE_PREFIX = "RESOURCE#"
PROFILE_SK = "PROFILE"
DETAILS_SK = "DETAILS"
EMAIL_LOCK_SK = "USER"

USER_ENTITY = "USER"
CAMPAIGN_ENTITY = "CAMPAIGN"
DONATION_ENTITY = "DONATION"
RESOURCE_ENTITY = "RESOURCE"


class DuplicateEmailError(Exception):
    pass


def to_dynamo(value: Any) -> Any:
    """Converts JSON-ready data into something boto3 can store (no floats, no None)."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value


def _timestamp(moment: datetime) -> str:
    return moment.isoformat()


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response['Error']['Code'] == 'ConditionalCheckFailedException'


class DynamoDataAccess:
    def __init__(self, table):
        self.table = table

    # -- helpers -----------------------------------------------------------

    def _query_all(self, max_items: int | None = None, **kwargs) -> list[dict]:
        """Follows LastEvaluatedKey until the query is exhausted or max_items matched."""
        items: list[dict] = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            if max_items is not None and len(items) >= max_items:
                return items[:max_items]
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _count(self, **kwargs) -> int:
        total = 0
        while True:
            response = self.table.query(Select="COUNT", **kwargs)
            total += response.get("Count", 0)
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return total
            kwargs["ExclusiveStartKey"] = last_key

    def _get(self, pk: str, sk: str) -> dict | None:
        response = self.table.get_item(Key={"PK": pk, "SK": sk})
        item = response.get("Item")
        return from_dynamo(item) if item else None

    @staticmethod
    def _entity_query(entity_type: str, filter_expression=None, newest_first: bool = True) -> dict:
        kwargs = {
            "IndexName": ENTITY_INDEX,
            "KeyConditionExpression": Key("entity_type").eq(entity_type),
            "ScanIndexForward": not newest_first,
        }
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression
        return kwargs

    # -- users -------------------------------------------------------------

    def create_user(self, user: User) -> User:
        email = user.email.lower()
        try:
            self.table.put_item(
                Item={
                    "PK": f"{EMAIL_PREFIX}{email}",
                    "SK": EMAIL_LOCK_SK,
                    "user_id": user.user_id,
                },
                ConditionExpression="attribute_not_exists(PK)"
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                logger.info(f"User already exists for {email}")
                raise DuplicateEmailError(email) from e
            raise

        item = to_dynamo(user.model_dump(mode="json"))
        item.update({
            "PK": f"{USER_PREFIX}{user.user_id}",
            "SK": PROFILE_SK,
            "entity_type": USER_ENTITY,
        })
        self.table.put_item(Item=item)
        return user

    def get_user(self, user_id: str) -> User | None:
        item = self._get(f"{USER_PREFIX}{user_id}", PROFILE_SK)
        return User.model_validate(item) if item else None

    def get_user_by_email(self, email: str) -> User | None:
        lock = self._get(f"{EMAIL_PREFIX}{email.lower()}", EMAIL_LOCK_SK)
        if not lock:
            return None
        return self.get_user(lock["user_id"])

    def count_users(self) -> int:
        return self._count(**self._entity_query(USER_ENTITY))

    # -- campaigns ---------------------------------------------------------

    def create_campaign(self, campaign: Campaign) -> Campaign:
        item = to_dynamo(campaign.model_dump(mode="json"))
        item.update({
            "PK": f"{CAMPAIGN_PREFIX}{campaign.campaign_id}",
            "SK": DETAILS_SK,
            "entity_type": CAMPAIGN_ENTITY,
            # Lower-cased copy backing case-insensitive search.
            "search_text": f"{campaign.title}\n{campaign.description}".lower(),
        })
        self.table.put_item(Item=item)
        return campaign

    def get_campaign(self, campaign_id: str) -> Campaign | None:
        item = self._get(f"{CAMPAIGN_PREFIX}{campaign_id}", DETAILS_SK)
        return Campaign.model_validate(item) if item else None

    def list_campaigns(self, category: str | None = None, status: str | None = None,
                       search: str | None = None) -> list[Campaign]:
        """All campaigns matching the filters, newest first."""
        conditions = []
        if category:
            conditions.append(Attr("category").eq(category))
        if status:
            conditions.append(Attr("status").eq(status))
        if search:
            conditions.append(Attr("search_text").contains(search.lower()))

        filter_expression = None
        for condition in conditions:
            filter_expression = condition if filter_expression is None else filter_expression & condition

        items = self._query_all(**self._entity_query(CAMPAIGN_ENTITY, filter_expression))
        return [Campaign.model_validate(from_dynamo(item)) for item in items]

    def count_campaigns(self, status: str | None = None) -> int:
        filter_expression = Attr("status").eq(status) if status else None
        return self._count(**self._entity_query(CAMPAIGN_ENTITY, filter_expression))

    def increment_raised_amount(self, campaign_id: str, amount: float) -> Campaign | None:
        """
        Adds `amount` to the campaign total in one update expression, so
        concurrent donations never overwrite each other's increments.
        Returns None when the campaign no longer exists.
        """
        try:
            response = self.table.update_item(
                Key={
                    "PK": f"{CAMPAIGN_PREFIX}{campaign_id}",
                    "SK": DETAILS_SK
                },
                UpdateExpression="SET #raised = if_not_exists(#raised, :start) + :inc, #updated = :now",
                ConditionExpression="attribute_exists(PK)",
                ExpressionAttributeNames={
                    "#raised": "raised_amount",
                    "#updated": "updated_at"
                },
                ExpressionAttributeValues={
                    ":inc": to_dynamo(float(amount)),
                    ":start": 0,
                    ":now": _timestamp(utcnow())
                },
                ReturnValues="ALL_NEW"
            )
            return Campaign.model_validate(from_dynamo(response["Attributes"]))
        except ClientError as e:
            if _is_conditional_failure(e):
                logger.warning(f"Campaign {campaign_id} vanished before it could be credited.",
                               extra={"campaign_id": campaign_id})
                return None
            logger.error(f"Error incrementing raised amount: {e}")
            raise

    def update_campaign_status(self, campaign_id: str, status: str) -> Campaign | None:
        try:
            response = self.table.update_item(
                Key={
                    "PK": f"{CAMPAIGN_PREFIX}{campaign_id}",
                    "SK": DETAILS_SK
                },
                UpdateExpression="SET #status = :s, #updated = :now",
                ConditionExpression="attribute_exists(PK)",
                ExpressionAttributeNames={
                    "#status": "status",
                    "#updated": "updated_at"
                },
                ExpressionAttributeValues={
                    ":s": status,
                    ":now": _timestamp(utcnow())
                },
                ReturnValues="ALL_NEW"
            )
            return Campaign.model_validate(from_dynamo(response["Attributes"]))
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            logger.error(f"Error updating campaign status: {e}")
            raise

    # -- donations ---------------------------------------------------------

    def create_donation_record(self, donation: Donation) -> Donation:
        item = to_dynamo(donation.model_dump(mode="json"))
        item.update({
            "PK": f"{DONATION_PREFIX}{donation.donation_id}",
            "SK": DETAILS_SK,
            "entity_type": DONATION_ENTITY,
            "donation_campaign_id": donation.campaign_id,
        })
        self.table.put_item(Item=item)
        return donation

    def get_donation(self, donation_id: str) -> Donation | None:
        item = self._get(f"{DONATION_PREFIX}{donation_id}", DETAILS_SK)
        return Donation.model_validate(item) if item else None

    def finalize_donation(self, donation_id: str, status: str, transaction_id: str,
                          payment_id: str | None = None,
                          completed_at: datetime | None = None) -> Donation | None:
        """
        Moves a donation out of `processing`. Returns None when it was not in
        `processing` any more (already settled), leaving the record untouched.
        """
        assignments = ["#status = :s", "#txn = :txn"]
        names = {"#status": "payment_status", "#txn": "transaction_id"}
        values: dict[str, Any] = {
            ":s": status,
            ":txn": transaction_id,
            ":processing": "processing"
        }
        if payment_id is not None:
            assignments.append("#pid = :pid")
            names["#pid"] = "payment_id"
            values[":pid"] = payment_id
        if completed_at is not None:
            assignments.append("#completed = :completed")
            names["#completed"] = "completed_at"
            values[":completed"] = _timestamp(completed_at)

        try:
            response = self.table.update_item(
                Key={
                    "PK": f"{DONATION_PREFIX}{donation_id}",
                    "SK": DETAILS_SK
                },
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="#status = :processing",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW"
            )
            return Donation.model_validate(from_dynamo(response["Attributes"]))
        except ClientError as e:
            if _is_conditional_failure(e):
                logger.info(f"Idempotency check: Donation {donation_id} is no longer processing.",
                            extra={"donation_id": donation_id})
                return None
            logger.error(f"Error finalizing donation: {e}")
            raise

    def list_campaign_donations(self, campaign_id: str, status: str | None = "completed",
                                limit: int | None = None) -> list[Donation]:
        kwargs = {
            "IndexName": CAMPAIGN_DONATIONS_INDEX,
            "KeyConditionExpression": Key("donation_campaign_id").eq(campaign_id),
            "ScanIndexForward": False,
        }
        if status:
            kwargs["FilterExpression"] = Attr("payment_status").eq(status)
        items = self._query_all(max_items=limit, **kwargs)
        return [Donation.model_validate(from_dynamo(item)) for item in items]

    def count_campaign_donations(self, campaign_id: str, status: str = "completed") -> int:
        return self._count(
            IndexName=CAMPAIGN_DONATIONS_INDEX,
            KeyConditionExpression=Key("donation_campaign_id").eq(campaign_id),
            FilterExpression=Attr("payment_status").eq(status),
        )

    def list_donations_by_donor(self, donor_id: str) -> list[Donation]:
        items = self._query_all(
            IndexName=DONOR_DONATIONS_INDEX,
            KeyConditionExpression=Key("donor_id").eq(donor_id),
            ScanIndexForward=False,
        )
        return [Donation.model_validate(from_dynamo(item)) for item in items]

    def list_donations(self, status: str | None = None, limit: int | None = None) -> list[Donation]:
        filter_expression = Attr("payment_status").eq(status) if status else None
        items = self._query_all(max_items=limit, **self._entity_query(DONATION_ENTITY, filter_expression))
        return [Donation.model_validate(from_dynamo(item)) for item in items]

    # -- resources ---------------------------------------------------------

    def create_resource(self, resource: Resource) -> Resource:
        item = to_dynamo(resource.model_dump(mode="json"))
        item.update({
            "PK": f"{RESOURCE_PREFIX}{resource.resource_id}",
            "SK": DETAILS_SK,
            "entity_type": RESOURCE_ENTITY,
            "city_search": (resource.location.city or "").lower(),
        })
        self.table.put_item(Item=item)
        return resource

    def list_resources(self, category: str, city: str | None = None,
                       resource_type: str | None = None) -> list[Resource]:
        """Resources in `category`, verified first, newest first within each group."""
        filter_expression = Attr("category").eq(category)
        if city:
            filter_expression = filter_expression & Attr("city_search").contains(city.lower())
        if resource_type:
            filter_expression = filter_expression & Attr("type").eq(resource_type)

        items = self._query_all(**self._entity_query(RESOURCE_ENTITY, filter_expression))
        resources = [Resource.model_validate(from_dynamo(item)) for item in items]
        # Stable sort keeps the index's recency order inside each group.
        return sorted(resources, key=lambda r: not r.is_verified)
