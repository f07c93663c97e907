from datetime import timedelta

import pytest

from ngohub.models.common import utcnow
from ngohub.models.resource import Resource, ResourceLocation
from ngohub.services.resource_service import resolve_category

HOSPITALS = "Tertiary Care Hospitals in Chennai"


@pytest.mark.parametrize("slug, category", [
    ("hospitals", HOSPITALS),
    ("blood-banks", "Blood Banks"),
    ("ambulance", "Ambulance Services"),
    ("mental-health-centers", "mental health centers"),
    ("day_care", "day care"),
])
def test_resolve_category(slug, category):
    assert resolve_category(slug) == category


def test_hospitals_slug_lists_verified_first(client, data_access):
    now = utcnow()
    data_access.create_resource(Resource(name="New Clinic", category=HOSPITALS, type="Private",
                                         location=ResourceLocation(city="Chennai"), created_at=now))
    data_access.create_resource(Resource(name="Apollo Hospital", category=HOSPITALS, type="Private",
                                         location=ResourceLocation(city="Chennai"), is_verified=True,
                                         created_at=now - timedelta(days=1)))
    data_access.create_resource(Resource(name="City Blood Bank", category="Blood Banks",
                                         location=ResourceLocation(city="Chennai")))

    body = client.get("/api/resources/hospitals").json()

    assert [r["name"] for r in body["resources"]] == ["Apollo Hospital", "New Clinic"]
    assert {r["category"] for r in body["resources"]} == {HOSPITALS}
    assert body["resources"][0]["isVerified"] is True
    assert body["pagination"] == {"current": 1, "pages": 1, "total": 2}


def test_resource_filters(client, data_access):
    data_access.create_resource(Resource(name="Stanley Hospital", category=HOSPITALS, type="Government",
                                         location=ResourceLocation(city="Chennai")))
    data_access.create_resource(Resource(name="Apollo Hospital", category=HOSPITALS, type="Private",
                                         location=ResourceLocation(city="Chennai")))

    by_type = client.get("/api/resources/hospitals", params={"type": "Government"}).json()
    by_city = client.get("/api/resources/hospitals", params={"city": "madurai"}).json()

    assert [r["name"] for r in by_type["resources"]] == ["Stanley Hospital"]
    assert by_city["resources"] == []
    assert by_city["pagination"]["total"] == 0
