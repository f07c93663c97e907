"""Loads the demo dataset: users, campaigns, donations and Chennai hospitals.

Run with ``ngohub-seed`` (or ``python -m ngohub.seed``). The table is created
when it does not exist yet.
"""
import logging
import random
from datetime import timedelta

from ngohub.core.config import settings
from ngohub.core.dependencies import get_dynamo_table, get_dynamodb_resource, get_payment_service
from ngohub.core.logging_config import configure_logging
from ngohub.core.security import hash_password
from ngohub.data_access.dynamodb import DuplicateEmailError, DynamoDataAccess
from ngohub.data_access.schema import create_table
from ngohub.models.campaign import Campaign, PatientInfo
from ngohub.models.common import utcnow
from ngohub.models.donation import Donation
from ngohub.models.resource import Resource, ResourceContact, ResourceLocation
from ngohub.models.user import User

logger = logging.getLogger(__name__)

USERS = [
    ("Admin User", "admin@ngohub.org", "admin123", "+91-9876543210", "admin"),
    ("Rajesh Kumar", "rajesh@example.com", "password123", "+91-9876543211", "user"),
    ("Sunita Sharma", "sunita@example.com", "password123", "+91-9876543212", "user"),
    ("Arjun Patel", "arjun@example.com", "password123", "+91-9876543213", "user"),
    ("Priya Singh", "priya@example.com", "password123", "+91-9876543214", "user"),
]

# (creator index, days to run, fields)
CAMPAIGNS = [
    (1, 30, dict(
        title="Support My Daughter Preethi to Recover from Blood Clot in Brain",
        description="My daughter needs urgent medical attention for blood clot treatment in her brain. "
                    "The surgery is critical and time-sensitive.",
        story="My daughter Preethi, just 8 years old, collapsed while playing in the garden. Doctors found "
              "a severe blood clot in her brain that needs immediate surgery. The estimated cost is "
              "₹5,00,000, far beyond what a daily wage worker can afford.",
        target_amount=500000, raised_amount=124178, category="Medical", beneficiary="Family Member",
        patient_info=PatientInfo(name="Preethi Kumar", age="8 years", condition="Blood clot in brain",
                                 hospital="Apollo Hospital, Chennai", city="Chennai"),
        location="Chennai",
    )),
    (2, 45, dict(
        title="Help Rahul Fight Cancer and Live His Dreams",
        description="Young Rahul needs chemotherapy and ongoing cancer treatment to beat leukemia and "
                    "pursue his dream of becoming a doctor.",
        story="Rahul is a bright 12-year-old diagnosed with acute lymphoblastic leukemia. Intensive "
              "chemotherapy will cost ₹8,00,000 and his father has already spent his savings.",
        target_amount=800000, raised_amount=256300, category="Medical", beneficiary="Family Member",
        patient_info=PatientInfo(name="Rahul Sharma", age="12 years", condition="Acute Lymphoblastic Leukemia",
                                 hospital="Tata Memorial Hospital, Mumbai", city="Mumbai"),
        location="Mumbai",
    )),
    (3, 60, dict(
        title="Support Education for Underprivileged Children",
        description="Providing quality education and resources to children in rural areas who lack access "
                    "to proper schooling facilities.",
        story="In Dharampur, 150 children walk 5 kilometers a day to a dilapidated school. We want to build "
              "a new school, provide learning materials and arrange transport.",
        target_amount=200000, raised_amount=89450, category="Education", beneficiary="Community",
        location="Dharampur Village, Bihar",
    )),
    (4, 40, dict(
        title="Clean Water Initiative for Rural Communities",
        description="Installing water purification systems and building wells in villages without access to "
                    "clean drinking water.",
        story="Five villages in rural Maharashtra rely on contaminated water. Solar-powered purification "
              "and deep wells will give 2000+ residents safe drinking water.",
        target_amount=150000, raised_amount=67890, category="Community", beneficiary="Community",
        location="Maharashtra",
    )),
    (1, 20, dict(
        title="Emergency Heart Surgery for Baby Aarav",
        description="6-month-old Aarav needs urgent heart surgery to repair a congenital heart defect.",
        story="Baby Aarav was born with Tetralogy of Fallot. The pediatric cardiac surgery costs ₹6,00,000, "
              "beyond the means of his parents who are daily wage laborers.",
        target_amount=600000, raised_amount=345670, category="Medical", beneficiary="Family Member",
        patient_info=PatientInfo(name="Aarav Kumar", age="6 months",
                                 condition="Tetralogy of Fallot (Congenital Heart Defect)",
                                 hospital="Fortis Hospital, Delhi", city="Delhi"),
        location="Delhi",
    )),
    (2, 35, dict(
        title="Flood Relief and Rehabilitation Program",
        description="Providing immediate relief and long-term rehabilitation support to flood-affected "
                    "families in Kerala.",
        story="Recent floods displaced over 500 families in our district. We provide food, clothing and "
              "shelter now, and rehabilitation programs to help families rebuild.",
        target_amount=300000, raised_amount=178900, category="Emergency Relief", beneficiary="Community",
        location="Kerala",
    )),
]

DONORS = [
    ("Amit Shah", "amit@email.com"), ("Riya Gupta", "riya@email.com"),
    ("Vikash Yadav", "vikash@email.com"), ("Anjali Mehta", "anjali@email.com"),
    ("Rohit Singh", "rohit@email.com"), ("Kavita Sharma", "kavita@email.com"),
    ("Deepak Kumar", "deepak@email.com"), ("Neha Agarwal", "neha@email.com"),
    ("Sanjay Patel", "sanjay@email.com"),
]
MESSAGES = ["God bless!", "Hope this helps", "Prayers for recovery", "Stay strong!", None]
PAYMENT_METHODS = ["card", "upi", "netbanking"]

HOSPITALS = "Tertiary Care Hospitals in Chennai"

RESOURCES = [
    Resource(
        name="Institute of Child Health and Hospital for Children", category=HOSPITALS, type="Government",
        description="Specialized pediatric care with advanced medical facilities",
        location=ResourceLocation(address="Egmore", city="Chennai", state="Tamil Nadu", pincode="600008"),
        contact=ResourceContact(phone=["+91-44-28194500", "+91-44-28194501"], email="info@ich.gov.in",
                                website="www.ich.gov.in"),
        specializations=["General Pediatrics", "Obstetrics", "Gynecology", "Gastroenterology", "Neurology"],
        facilities=["Emergency Department", "X-ray Complex", "24/7 Emergency Services", "ICU", "Blood Bank"],
        working_hours="24/7", is_verified=True,
    ),
    Resource(
        name="Royapettah Government Hospital", category=HOSPITALS, type="Government",
        description="Multi-specialty government hospital with comprehensive medical services",
        location=ResourceLocation(address="Royapettah", city="Chennai", state="Tamil Nadu", pincode="600014"),
        contact=ResourceContact(phone=["+91-44-28331234", "+91-44-28335678"], email="rgh@tnhealth.org"),
        specializations=["General Medicine", "General Surgery", "Orthopedics", "Oncology", "Nephrology"],
        facilities=["ICU", "Emergency Ward", "OPD Services", "Blood Bank", "Diagnostic Services"],
        working_hours="24/7", is_verified=True,
    ),
    Resource(
        name="Kilpauk Medical College Hospital", category=HOSPITALS, type="Government",
        description="Premier medical college hospital with super specialty services",
        location=ResourceLocation(address="Kilpauk", city="Chennai", state="Tamil Nadu", pincode="600010"),
        contact=ResourceContact(phone=["+91-44-26642424"], email="kmc@tnmgrmu.ac.in"),
        specializations=["Cardiac Surgery", "Neurology", "Orthopedic Surgery", "Urological Surgery"],
        facilities=["AC Rooms", "Canteen", "Ward Facilities", "Advanced Operation Theaters", "ICU"],
        working_hours="24/7", is_verified=True,
    ),
    Resource(
        name="Apollo Hospital", category=HOSPITALS, type="Private",
        description="Leading private hospital with world-class medical facilities",
        location=ResourceLocation(address="Greams Road", city="Chennai", state="Tamil Nadu", pincode="600006"),
        contact=ResourceContact(phone=["+91-44-28291200"], email="chennai@apollohospitals.com",
                                website="www.apollohospitals.com"),
        specializations=["Cardiology", "Oncology", "Neurology", "Orthopedics", "Transplant Surgery"],
        facilities=["24/7 Emergency", "Advanced ICU", "Cath Lab", "MRI/CT Scan", "Blood Bank", "Pharmacy"],
        working_hours="24/7", is_verified=True,
    ),
]


def seed_users(data_access: DynamoDataAccess) -> list[User]:
    users = []
    for name, email, password, phone, role in USERS:
        user = User(name=name, email=email, password_hash=hash_password(password), phone=phone,
                    role=role, is_verified=True)
        try:
            users.append(data_access.create_user(user))
        except DuplicateEmailError:
            logger.info(f"Keeping existing user {email}")
            users.append(data_access.get_user_by_email(email))
    return users


def seed_campaigns(data_access: DynamoDataAccess, users: list[User], rng: random.Random) -> int:
    payment_service = get_payment_service()
    now = utcnow()
    donation_count = 0

    for creator_index, days, fields in CAMPAIGNS:
        donations = []
        for _ in range(rng.randint(3, 10)):
            donor_name, donor_email = rng.choice(DONORS)
            is_anonymous = rng.random() > 0.7
            transaction_id = payment_service.generate_transaction_id()
            donations.append(Donation(
                campaign_id="",
                donor_name=donor_name,
                donor_email=donor_email,
                amount=rng.randint(500, 10500),
                payment_method=rng.choice(PAYMENT_METHODS),
                payment_status="completed",
                payment_id=f"PAY{transaction_id}",
                transaction_id=transaction_id,
                is_anonymous=is_anonymous,
                message=None if is_anonymous else rng.choice(MESSAGES),
                created_at=now - timedelta(seconds=rng.uniform(0, 30 * 24 * 3600)),
                completed_at=now
            ))

        # The stored total never exceeds what the seeded donations add up to.
        fields = dict(fields)
        fields["raised_amount"] = min(fields["raised_amount"], sum(d.amount for d in donations))
        campaign = data_access.create_campaign(Campaign(
            creator_id=users[creator_index].user_id,
            status="active",
            duration=days,
            end_date=now + timedelta(days=days),
            **fields
        ))
        for donation in donations:
            donation.campaign_id = campaign.campaign_id
            data_access.create_donation_record(donation)
        donation_count += len(donations)

    return donation_count


def seed_resources(data_access: DynamoDataAccess) -> int:
    for resource in RESOURCES:
        data_access.create_resource(resource.model_copy(deep=True))
    return len(RESOURCES)


def seed(data_access: DynamoDataAccess, rng: random.Random | None = None) -> dict:
    rng = rng or random.Random()
    users = seed_users(data_access)
    donations = seed_campaigns(data_access, users, rng)
    resources = seed_resources(data_access)
    summary = {
        "users": len(users),
        "campaigns": len(CAMPAIGNS),
        "donations": donations,
        "resources": resources,
    }
    logger.info(f"Database seeding completed: {summary}")
    return summary


def main():
    configure_logging()
    create_table(get_dynamodb_resource(), settings.DYNAMODB_TABLE_NAME)
    seed(get_dynamo_table())
    logger.info("Admin: admin@ngohub.org / admin123")
    logger.info("User: rajesh@example.com / password123")


if __name__ == "__main__":
    main()
