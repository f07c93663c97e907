import os
from datetime import timedelta

from conftest import auth_header, make_campaign
from ngohub.models.common import utcnow
from ngohub.models.donation import Donation


def test_list_filters_by_category_and_search(client, data_access, creator):
    now = utcnow()
    make_campaign(data_access, creator, title="Help Rahul Fight Cancer", created_at=now)
    make_campaign(data_access, creator, title="Heart surgery for Aarav", description="Cardiac care",
                  created_at=now - timedelta(minutes=1))
    make_campaign(data_access, creator, title="School for Dharampur", category="Education",
                  description="Fight illiteracy, not cancer", created_at=now - timedelta(minutes=2))

    medical = client.get("/api/campaigns", params={"category": "Medical"}).json()
    assert {c["category"] for c in medical["campaigns"]} == {"Medical"}
    assert medical["pagination"] == {"current": 1, "pages": 1, "total": 2}

    cancer = client.get("/api/campaigns", params={"search": "cancer"}).json()
    for c in cancer["campaigns"]:
        assert "cancer" in (c["title"] + c["description"]).lower()
    assert cancer["pagination"]["total"] == 2

    everything = client.get("/api/campaigns", params={"category": "All"}).json()
    assert everything["pagination"]["total"] == 3
    assert everything["campaigns"][0]["title"] == "Help Rahul Fight Cancer"
    assert everything["campaigns"][0]["creator"]["name"] == creator.name


def test_list_paginates(client, data_access, creator):
    now = utcnow()
    for i in range(5):
        make_campaign(data_access, creator, title=f"Campaign {i}", created_at=now - timedelta(minutes=i))

    page = client.get("/api/campaigns", params={"page": 2, "limit": 2}).json()

    assert [c["title"] for c in page["campaigns"]] == ["Campaign 2", "Campaign 3"]
    assert page["pagination"] == {"current": 2, "pages": 3, "total": 5}


def test_detail_reports_derived_values(client, data_access, creator):
    campaign = make_campaign(data_access, creator, raised_amount=25000, target_amount=100000,
                             end_date=utcnow() - timedelta(days=2))
    for name, status in (("Riya Gupta", "completed"), ("Anonymous", "completed"), ("Rohit Singh", "failed")):
        data_access.create_donation_record(Donation(
            campaign_id=campaign.campaign_id, donor_name=name, donor_email="d@example.com",
            amount=100, payment_status=status, is_anonymous=name == "Anonymous"))

    body = client.get(f"/api/campaigns/{campaign.campaign_id}").json()

    assert body["id"] == campaign.campaign_id
    assert body["progress"] == 0.25
    assert body["daysLeft"] == 0
    assert body["donorCount"] == 2
    assert len(body["recentDonations"]) == 2
    assert {d["donorName"] for d in body["recentDonations"]} == {"Riya Gupta", "Anonymous"}
    assert body["creator"]["email"] == creator.email


def test_detail_404(client):
    response = client.get("/api/campaigns/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Campaign not found"}


def test_create_campaign_with_upload(client, data_access, creator, notifications):
    response = client.post(
        "/api/campaigns",
        headers=auth_header(creator),
        data={
            "title": "Flood relief",
            "description": "Relief for Kerala",
            "story": "500 families displaced",
            "targetAmount": "300000",
            "category": "Emergency Relief",
            "city": "Kochi",
            "patientName": "",
            "duration": "10",
        },
        files=[("images", ("photo.png", b"\x89PNG...", "image/png"))],
    )

    assert response.status_code == 201
    campaign = response.json()["campaign"]
    assert campaign["status"] == "pending"
    assert campaign["raisedAmount"] == 0
    assert campaign["location"] == "Kochi"
    assert campaign["daysLeft"] == 10
    assert len(campaign["images"]) == 1 and campaign["images"][0].startswith("images-")
    assert data_access.get_campaign(campaign["id"]).creator_id == creator.user_id
    assert notifications.subjects_for(creator.email) == ["Campaign Created Successfully"]


def test_create_campaign_requires_login(client):
    response = client.post("/api/campaigns", data={"title": "x"})

    assert response.status_code == 401


def test_create_campaign_rejects_bad_target(client, creator):
    response = client.post(
        "/api/campaigns",
        headers=auth_header(creator),
        data={"title": "t", "description": "d", "story": "s", "targetAmount": "-5", "category": "Medical"},
    )

    assert response.status_code == 400


def test_unknown_status_filter_matches_nothing(client, campaign):
    response = client.get("/api/campaigns", params={"status": "archived"})

    assert response.status_code == 200
    assert response.json()["campaigns"] == []
    assert response.json()["pagination"]["total"] == 0


def test_create_campaign_rejects_infinite_target(client, creator):
    response = client.post(
        "/api/campaigns",
        headers=auth_header(creator),
        data={"title": "t", "description": "d", "story": "s", "targetAmount": "inf", "category": "Medical"},
    )

    assert response.status_code == 400


def test_rejected_upload_leaves_no_files_behind(client, creator, data_access, storage):
    response = client.post(
        "/api/campaigns",
        headers=auth_header(creator),
        data={
            "title": "Flood relief",
            "description": "Relief for Kerala",
            "story": "500 families displaced",
            "targetAmount": "300000",
            "category": "Emergency Relief",
        },
        files=[
            ("images", ("photo.png", b"\x89PNG...", "image/png")),
            ("documents", ("bills.pdf", b"0" * 2048, "application/pdf")),
        ],
    )

    assert response.status_code == 400
    assert os.listdir(storage.upload_dir) == []
    assert data_access.list_campaigns() == []
