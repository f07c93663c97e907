import logging
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

ENTITY_INDEX = "EntityIndex"
CAMPAIGN_DONATIONS_INDEX = "CampaignDonationsIndex"
DONOR_DONATIONS_INDEX = "DonorDonationsIndex"

# (index name, partition attribute); every index sorts on created_at.
# donation_campaign_id is written on donations only, so campaign items stay
# out of the per-campaign donation index.
GLOBAL_INDEXES = (
    (ENTITY_INDEX, "entity_type"),
    (CAMPAIGN_DONATIONS_INDEX, "donation_campaign_id"),
    (DONOR_DONATIONS_INDEX, "donor_id"),
)


def create_table(dynamodb_resource, table_name: str):
    """
    Creates the single NGOHub table with its secondary indexes.
    Returns the existing table when it is already there.
    """
    attribute_names = ["PK", "SK", "created_at"] + [pk for _, pk in GLOBAL_INDEXES]
    try:
        table = dynamodb_resource.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": name, "AttributeType": "S"} for name in attribute_names
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": index_name,
                    "KeySchema": [
                        {"AttributeName": partition_key, "KeyType": "HASH"},
                        {"AttributeName": "created_at", "KeyType": "RANGE"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                }
                for index_name, partition_key in GLOBAL_INDEXES
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        table.wait_until_exists()
        logger.info(f"Created table {table_name}")
        return table
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceInUseException':
            logger.info(f"Table {table_name} already exists")
            return dynamodb_resource.Table(table_name)
        raise
