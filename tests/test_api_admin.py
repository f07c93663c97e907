from conftest import auth_header, make_campaign
from ngohub.models.donation import Donation


def test_dashboard_requires_admin(client, creator):
    response = client.get("/api/admin/dashboard", headers=auth_header(creator))

    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


def test_dashboard_stats(client, data_access, admin, creator, campaign):
    make_campaign(data_access, creator, title="Awaiting review", status="pending")
    for amount, status in ((500, "completed"), (250, "completed"), (900, "failed")):
        data_access.create_donation_record(Donation(
            campaign_id=campaign.campaign_id, donor_name="Neha Agarwal",
            donor_email="neha@example.com", amount=amount, payment_status=status))

    body = client.get("/api/admin/dashboard", headers=auth_header(admin)).json()

    assert body["stats"] == {
        "totalCampaigns": 2,
        "activeCampaigns": 1,
        "totalDonations": 2,
        "totalUsers": 2,
        "totalAmountRaised": 750,
    }
    assert [c["title"] for c in body["recentCampaigns"]] == ["Awaiting review"]
    assert len(body["recentDonations"]) == 2
    assert body["recentDonations"][0]["campaign"]["title"] == campaign.title


def test_status_update_notifies_creator(client, data_access, admin, creator, notifications):
    campaign = make_campaign(data_access, creator, status="pending")

    response = client.put(
        f"/api/admin/campaigns/{campaign.campaign_id}/status",
        json={"status": "active"},
        headers=auth_header(admin),
    )

    assert response.status_code == 200
    assert response.json()["campaign"]["status"] == "active"
    assert data_access.get_campaign(campaign.campaign_id).status == "active"
    assert notifications.subjects_for(creator.email) == ["Campaign Approved"]


def test_status_update_validation_and_missing(client, admin, campaign):
    invalid = client.put(f"/api/admin/campaigns/{campaign.campaign_id}/status",
                         json={"status": "archived"}, headers=auth_header(admin))
    missing = client.put("/api/admin/campaigns/nope/status",
                         json={"status": "active"}, headers=auth_header(admin))

    assert invalid.status_code == 400
    assert missing.status_code == 404


def test_status_update_by_regular_user_is_forbidden(client, creator, campaign):
    response = client.put(f"/api/admin/campaigns/{campaign.campaign_id}/status",
                          json={"status": "suspended"}, headers=auth_header(creator))

    assert response.status_code == 403
