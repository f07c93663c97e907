import logging
import math
import re
from pydantic import BaseModel

from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.models.resource import Resource

logger = logging.getLogger(__name__)

# Category slugs used by the client, mapped to the names stored on resources.
CATEGORY_MAP = {
    "hospitals": "Tertiary Care Hospitals in Chennai",
    "accommodations": "Accommodations",
    "medicines": "Medicine and Drugs",
    "blood-banks": "Blood Banks",
    "ambulance": "Ambulance Services",
}


def resolve_category(slug: str) -> str:
    """Unknown slugs fall back to the slug with separators turned into spaces."""
    if slug in CATEGORY_MAP:
        return CATEGORY_MAP[slug]
    return re.sub(r"[-_]+", " ", slug)


class ResourcePage(BaseModel):
    resources: list[Resource]
    current: int
    pages: int
    total: int


class ResourceService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def list_resources(self, category_slug: str, city: str | None = None,
                       resource_type: str | None = None, page: int = 1,
                       limit: int = 10) -> ResourcePage:
        category = resolve_category(category_slug)
        matches = self.data_access.list_resources(category, city=city, resource_type=resource_type)
        logger.info(f"Found {len(matches)} resources for category '{category}' (slug '{category_slug}')")

        start = (page - 1) * limit
        total = len(matches)
        return ResourcePage(
            resources=matches[start:start + limit],
            current=page,
            pages=math.ceil(total / limit),
            total=total
        )
