import json
import logging
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

logger = logging.getLogger(__name__)

EMAIL_JOB = "EMAIL"


def format_amount(amount: float) -> str:
    return f"{amount:.2f}".rstrip("0").rstrip(".")


class NotificationService:
    """
    Sends email notifications through SES.

    `send_notification` never raises: failures come back as False. When a
    queue is configured the message is handed to SQS and the notification
    worker delivers it later.

    SES retries stop after three attempts or once `max_delay_seconds` have
    passed, whichever comes first, so a caller waits at most that long plus
    one client timeout.
    """

    def __init__(self, client, from_email: str, enabled: bool = True,
                 sqs_client=None, queue_url: str | None = None,
                 max_delay_seconds: float = 5.0):
        self.ses_client = client
        self.from_email = from_email
        self.enabled = enabled
        self.sqs_client = sqs_client
        self.queue_url = queue_url
        self.max_delay_seconds = max_delay_seconds

    def _deliver(self, email_to: str, subject: str, body_html: str):
        retrying = Retrying(
            wait=wait_exponential(multiplier=1, min=1, max=4),
            stop=stop_after_attempt(3) | stop_after_delay(self.max_delay_seconds),
            retry=retry_if_exception_type((ClientError, BotoCoreError))
        )
        for attempt in retrying:
            with attempt:
                self.ses_client.send_email(
                    Source=self.from_email,
                    Destination={'ToAddresses': [email_to]},
                    Message={
                        'Subject': {'Data': subject},
                        'Body': {'Html': {'Data': body_html}}
                    }
                )

    def send_now(self, email_to: str, subject: str, body_html: str) -> bool:
        if not self.enabled:
            logger.info(f"Mock email sent to {email_to}, subject: {subject}")
            return True

        try:
            self._deliver(email_to, subject, body_html)
        except (RetryError, ClientError, BotoCoreError) as e:
            logger.error(f"Email sending to {email_to} failed: {e}")
            return False

        logger.info(f"Successfully sent email to {email_to}")
        return True

    def _enqueue(self, email_to: str, subject: str, body_html: str) -> bool:
        job = {
            "type": EMAIL_JOB,
            "email_to": email_to,
            "subject": subject,
            "body": body_html
        }
        try:
            self.sqs_client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=json.dumps(job)
            )
        except ClientError as e:
            logger.error(f"SQS Error queueing email to {email_to}: {e}")
            return False
        return True

    def send_notification(self, email_to: str, subject: str, body_html: str) -> bool:
        try:
            if self.queue_url and self.sqs_client is not None:
                return self._enqueue(email_to, subject, body_html)
            return self.send_now(email_to, subject, body_html)
        except Exception:
            logger.exception(f"Unexpected error notifying {email_to}")
            return False

    # Message templates used by the API.

    def send_welcome(self, email_to: str, name: str) -> bool:
        return self.send_notification(
            email_to,
            "Welcome to NGOHub!",
            f"<h1>Welcome {name}!</h1><p>Thank you for joining NGOHub. Start making a difference today!</p>"
        )

    def send_donation_receipt(self, email_to: str, amount: float, campaign_title: str,
                              transaction_id: str) -> bool:
        return self.send_notification(
            email_to,
            "Donation Confirmation - NGOHub",
            f"<h1>Thank you for your donation!</h1>"
            f"<p>Your donation of ₹{format_amount(amount)} to \"{campaign_title}\" has been processed successfully.</p>"
            f"<p>Transaction ID: {transaction_id}</p>"
        )

    def send_new_donation_alert(self, email_to: str, amount: float, campaign_title: str,
                                donor_name: str) -> bool:
        return self.send_notification(
            email_to,
            "New Donation Received!",
            f"<h1>Great news!</h1>"
            f"<p>Your campaign \"{campaign_title}\" just received a donation of ₹{format_amount(amount)}!</p>"
            f"<p>Donor: {donor_name}</p>"
        )

    def send_campaign_submitted(self, email_to: str, campaign_title: str) -> bool:
        return self.send_notification(
            email_to,
            "Campaign Created Successfully",
            f"<h1>Your campaign \"{campaign_title}\" has been submitted!</h1>"
            f"<p>Our team will review and approve your campaign within 24-48 hours.</p>"
        )

    def send_campaign_status_update(self, email_to: str, campaign_title: str, status: str) -> bool:
        subject = "Campaign Approved" if status == "active" else "Campaign Status Updated"
        body = (
            f"<h1>Campaign Status Update</h1>"
            f"<p>Your campaign \"{campaign_title}\" status has been updated to: {status}</p>"
        )
        if status == "active":
            body += "<p>Your campaign is now live and accepting donations!</p>"
        return self.send_notification(email_to, subject, body)
