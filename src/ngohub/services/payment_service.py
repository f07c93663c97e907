import logging
import random
import string
import time
from pydantic import BaseModel

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_uppercase + string.digits


class PaymentResult(BaseModel):
    success: bool
    transaction_id: str
    payment_id: str | None = None
    status: str
    message: str


class RefundResult(BaseModel):
    success: bool
    refund_id: str
    amount: float
    status: str
    message: str


class MockPaymentService:
    """
    Stand-in for a payment gateway.

    Each charge is an independent Bernoulli trial with probability
    `success_rate`, after a fixed artificial delay. Identifiers are a
    millisecond timestamp plus a random suffix, so they are only
    probabilistically unique.
    """

    def __init__(
        self,
        success_rate: float = 0.9,
        delay_seconds: float = 2.0,
        refund_delay_seconds: float = 1.0,
        rng: random.Random | None = None
    ):
        self.success_rate = success_rate
        self.delay_seconds = delay_seconds
        self.refund_delay_seconds = refund_delay_seconds
        self.rng = rng or random.Random()

    def _generate_id(self, prefix: str) -> str:
        suffix = "".join(self.rng.choices(_ID_ALPHABET, k=9))
        return f"{prefix}{int(time.time() * 1000)}{suffix}"

    def generate_transaction_id(self) -> str:
        return self._generate_id("TXN")

    def process_payment(self, amount: float, donor_email: str, campaign_id: str) -> PaymentResult:
        if self.delay_seconds:
            time.sleep(self.delay_seconds)

        transaction_id = self.generate_transaction_id()
        if self.rng.random() < self.success_rate:
            logger.info(f"Mock payment of {amount} for campaign {campaign_id} succeeded.",
                        extra={"campaign_id": campaign_id, "transaction_id": transaction_id})
            return PaymentResult(
                success=True,
                transaction_id=transaction_id,
                payment_id=f"PAY{transaction_id}",
                status="completed",
                message="Payment processed successfully"
            )

        logger.info(f"Mock payment of {amount} for campaign {campaign_id} declined.",
                    extra={"campaign_id": campaign_id, "transaction_id": transaction_id})
        return PaymentResult(
            success=False,
            transaction_id=transaction_id,
            status="failed",
            message="Payment failed. Please try again."
        )

    def refund_payment(self, transaction_id: str, amount: float) -> RefundResult:
        # Not called by any flow yet.
        if self.refund_delay_seconds:
            time.sleep(self.refund_delay_seconds)

        return RefundResult(
            success=True,
            refund_id=self._generate_id("REF"),
            amount=amount,
            status="refunded",
            message="Refund processed successfully"
        )
