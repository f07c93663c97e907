import random

from ngohub import seed


def test_seed_loads_demo_data(data_access):
    summary = seed.seed(data_access, rng=random.Random(7))

    assert summary["users"] == 5
    assert summary["campaigns"] == 6
    assert summary["resources"] == 4
    assert data_access.get_user_by_email("admin@ngohub.org").role == "admin"

    for campaign in data_access.list_campaigns():
        donations = data_access.list_campaign_donations(campaign.campaign_id)
        assert 3 <= len(donations) <= 10
        assert campaign.raised_amount <= sum(d.amount for d in donations)

    hospitals = data_access.list_resources("Tertiary Care Hospitals in Chennai")
    assert len(hospitals) == 4


def test_seeding_twice_keeps_users_unique(data_access):
    seed.seed(data_access, rng=random.Random(1))
    seed.seed(data_access, rng=random.Random(2))

    assert data_access.count_users() == 5
