import pytest

from conftest import auth_header, make_user


def _payload(campaign, **overrides):
    body = {
        "campaignId": campaign.campaign_id,
        "donorName": "Amit Shah",
        "donorEmail": "amit@example.com",
        "amount": 500,
        "paymentMethod": "upi",
        "message": "Stay strong!",
        "isAnonymous": False,
    }
    body.update(overrides)
    return body


def test_successful_donation_end_to_end(client, data_access, campaign):
    response = client.post("/api/donations", json=_payload(campaign))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Payment processed successfully"
    assert body["donation"]["status"] == "completed"
    assert body["donation"]["amount"] == 500
    assert body["donation"]["transactionId"].startswith("TXN")
    assert data_access.get_campaign(campaign.campaign_id).raised_amount == 500


def test_declined_donation_still_answers_200(client, data_access, campaign, payments):
    payments.success_rate = 0.0

    response = client.post("/api/donations", json=_payload(campaign))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["donation"]["status"] == "failed"
    assert data_access.get_donation(body["donation"]["id"]).payment_status == "failed"
    assert data_access.get_campaign(campaign.campaign_id).raised_amount == 0


def test_amount_given_as_string_is_parsed(client, campaign):
    response = client.post("/api/donations", json=_payload(campaign, amount="250.50"))

    assert response.status_code == 200
    assert response.json()["donation"]["amount"] == 250.5


def test_unknown_campaign_is_404(client):
    class Missing:
        campaign_id = "missing"

    response = client.post("/api/donations", json=_payload(Missing()))

    assert response.status_code == 404
    assert response.json() == {"error": "Campaign not found"}


def test_invalid_request_is_rejected_before_any_write(client, data_access, campaign):
    for bad in ({"amount": 0}, {"amount": "lots"}, {"donorEmail": "not-an-email"}):
        response = client.post("/api/donations", json=_payload(campaign, **bad))
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    assert data_access.list_donations() == []


@pytest.mark.parametrize("amount", ["inf", "-Infinity", "NaN", 1e-200, 1e200, 10.005])
def test_unstorable_amount_is_rejected_before_any_write(client, data_access, campaign, amount):
    response = client.post("/api/donations", json=_payload(campaign, amount=amount))

    assert response.status_code == 400
    assert "error" in response.json()
    assert data_access.list_donations() == []
    assert data_access.get_campaign(campaign.campaign_id).raised_amount == 0


def test_anonymous_donation_response_and_record(client, data_access, campaign):
    response = client.post("/api/donations", json=_payload(campaign, donorName="Jane Doe", isAnonymous=True))

    stored = data_access.get_donation(response.json()["donation"]["id"])
    assert stored.donor_name == "Anonymous"
    assert stored.is_anonymous is True


def test_internal_settlement_error_is_500(client, data_access, campaign, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("table unavailable")

    monkeypatch.setattr(data_access, "create_donation_record", broken)

    response = client.post("/api/donations", json=_payload(campaign))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_logged_in_donor_is_recorded_and_listed(client, data_access, campaign):
    donor = make_user(data_access, name="Sunita Sharma", email="sunita@example.com")

    client.post("/api/donations", json=_payload(campaign), headers=auth_header(donor))
    client.post("/api/donations", json=_payload(campaign, amount=100))

    response = client.get(f"/api/donations/user/{donor.user_id}", headers=auth_header(donor))

    assert response.status_code == 200
    [donation] = response.json()
    assert donation["donorId"] == donor.user_id
    assert donation["paymentStatus"] == "completed"
    assert donation["campaign"]["title"] == campaign.title


def test_bad_token_on_donation_is_ignored(client, data_access, campaign):
    response = client.post(
        "/api/donations",
        json=_payload(campaign),
        headers={"Authorization": "Bearer garbage"}
    )

    assert response.status_code == 200
    assert data_access.get_donation(response.json()["donation"]["id"]).donor_id is None


def test_user_donations_require_a_token(client, creator):
    missing = client.get(f"/api/donations/user/{creator.user_id}")
    invalid = client.get(f"/api/donations/user/{creator.user_id}", headers={"Authorization": "Bearer nope"})

    assert missing.status_code == 401
    assert missing.json() == {"error": "Access token required"}
    assert invalid.status_code == 403
    assert invalid.json() == {"error": "Invalid or expired token"}
