import logging
import math
from contextlib import contextmanager
from pydantic import BaseModel

from ngohub.core.errors import (
    NgoHubError,
    NotFoundError,
    PaymentDeclined,
    SettlementError,
    ValidationError,
)
from ngohub.data_access.dynamodb import DynamoDataAccess
from ngohub.models.campaign import Campaign
from ngohub.models.common import utcnow
from ngohub.models.donation import Donation
from ngohub.services.notification_service import NotificationService
from ngohub.services.payment_service import MockPaymentService, PaymentResult

logger = logging.getLogger(__name__)

RECORD_INTENT = "record_intent"
SETTLE_PAYMENT = "settle_payment"
APPLY_OUTCOME = "apply_outcome"
CREDIT_CAMPAIGN = "credit_campaign"
NOTIFY = "notify"

MIN_AMOUNT = 0.01
MAX_STORABLE_AMOUNT = 1e125


class SettlementResult(BaseModel):
    success: bool
    message: str
    donation: Donation


class DonationService:
    """
    Runs a donation through settlement:

    record_intent -> settle_payment -> apply_outcome -> credit_campaign -> notify

    The donation is persisted as `processing` before any money moves.
    A declined payment is a normal outcome (the donation ends `failed`);
    any other stage failure raises SettlementError naming the stage.
    Nothing is rolled back.
    """

    def __init__(
        self,
        data_access: DynamoDataAccess,
        payment_service: MockPaymentService,
        notification_service: NotificationService,
        max_amount: float | None = None
    ):
        self.data_access = data_access
        self.payment_service = payment_service
        self.notification_service = notification_service
        self.max_amount = max_amount

    @contextmanager
    def _stage(self, name: str, donation_id: str | None = None):
        try:
            yield
        except NgoHubError:
            raise
        except Exception as e:
            logger.exception(f"Settlement stage {name} failed.",
                             extra={"stage": name, "donation_id": donation_id})
            raise SettlementError(name, donation_id) from e

    def _validate_amount(self, amount: float):
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Donation amount must be a positive number")
        # Whole paise only, and within what a DynamoDB number can hold.
        if round(amount, 2) != amount or amount < MIN_AMOUNT or amount > MAX_STORABLE_AMOUNT:
            raise ValidationError("Donation amount must be in rupees with at most two decimal places")
        if self.max_amount is not None and amount > self.max_amount:
            raise ValidationError(f"Donation amount cannot exceed {self.max_amount}")

    def submit_donation(
        self,
        campaign_id: str,
        donor_name: str,
        donor_email: str,
        amount: float,
        payment_method: str | None = None,
        message: str | None = None,
        is_anonymous: bool = False,
        donor_id: str | None = None
    ) -> SettlementResult:
        self._validate_amount(amount)

        campaign = self.data_access.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError("Campaign not found")

        with self._stage(RECORD_INTENT):
            donation = self.data_access.create_donation_record(Donation(
                campaign_id=campaign_id,
                donor_id=donor_id,
                donor_name=donor_name,
                donor_email=donor_email,
                amount=amount,
                payment_method=payment_method or "card",
                payment_status="processing",
                is_anonymous=is_anonymous,
                message=message
            ))
        donation_id = donation.donation_id

        try:
            payment = self._settle_payment(donation)
        except PaymentDeclined as declined:
            payment = declined.result
            logger.warning(f"Payment failed for donation {donation_id}.",
                           extra={"donation_id": donation_id, "stage": SETTLE_PAYMENT})

        with self._stage(APPLY_OUTCOME, donation_id):
            settled = self.data_access.finalize_donation(
                donation_id=donation_id,
                status=payment.status,
                transaction_id=payment.transaction_id,
                payment_id=payment.payment_id,
                completed_at=utcnow() if payment.success else None
            )

        if settled is None:
            # Settled by someone else already; crediting again would double count.
            settled = self.data_access.get_donation(donation_id)
            logger.info(f"Skipped duplicate processing for donation {donation_id}.",
                        extra={"donation_id": donation_id})
            return SettlementResult(
                success=settled.payment_status == "completed",
                message=payment.message,
                donation=settled
            )

        if payment.success:
            with self._stage(CREDIT_CAMPAIGN, donation_id):
                credited = self.data_access.increment_raised_amount(campaign_id, settled.amount)
            if credited is None:
                raise SettlementError(CREDIT_CAMPAIGN, donation_id)

            self._notify(campaign, settled)
            logger.info(f"Successfully processed donation {donation_id}.",
                        extra={"donation_id": donation_id, "campaign_id": campaign_id})

        return SettlementResult(success=payment.success, message=payment.message, donation=settled)

    def _settle_payment(self, donation: Donation) -> PaymentResult:
        with self._stage(SETTLE_PAYMENT, donation.donation_id):
            result = self.payment_service.process_payment(
                amount=donation.amount,
                donor_email=donation.donor_email,
                campaign_id=donation.campaign_id
            )
        if not result.success:
            raise PaymentDeclined(result.message, result=result)
        return result

    def _notify(self, campaign: Campaign, donation: Donation):
        """Best effort: a failure here is logged and does not undo the donation."""
        try:
            self.notification_service.send_donation_receipt(
                email_to=donation.donor_email,
                amount=donation.amount,
                campaign_title=campaign.title,
                transaction_id=donation.transaction_id
            )
            creator = self.data_access.get_user(campaign.creator_id)
            if creator:
                self.notification_service.send_new_donation_alert(
                    email_to=creator.email,
                    amount=donation.amount,
                    campaign_title=campaign.title,
                    donor_name=donation.donor_name
                )
        except Exception:
            logger.exception("Donation notifications failed.",
                             extra={"stage": NOTIFY, "donation_id": donation.donation_id})

    def list_user_donations(self, user_id: str) -> list[tuple[Donation, Campaign | None]]:
        donations = self.data_access.list_donations_by_donor(user_id)
        campaigns: dict[str, Campaign | None] = {}
        for donation in donations:
            if donation.campaign_id not in campaigns:
                campaigns[donation.campaign_id] = self.data_access.get_campaign(donation.campaign_id)
        return [(donation, campaigns[donation.campaign_id]) for donation in donations]
