import json
import logging
from ngohub.core.dependencies import get_notification_service
from ngohub.services.notification_service import EMAIL_JOB

# Workers are entry points, so they set up logging themselves
from ngohub.core.logging_config import configure_logging
configure_logging()

logger = logging.getLogger(__name__)

def lambda_handler(event, context, notification_service=None):
    notification_service = notification_service or get_notification_service()
    logger.info(f"Received {len(event['Records'])} notification jobs.")

    for record in event['Records']:
        try:
            job = json.loads(record['body'])

            if job.get("type") != EMAIL_JOB:
                logger.warning(f"Skipping unknown notification job type: {job.get('type')}")
                continue

            delivered = notification_service.send_now(
                email_to=job['email_to'],
                subject=job['subject'],
                body_html=job['body']
            )
            if not delivered:
                # Let SQS redeliver the message.
                raise RuntimeError(f"Email to {job['email_to']} was not delivered")

        except Exception as e:
            logger.error(f"CRITICAL: Failed to process message {record['messageId']}. Error: {e}")
            raise e

    return {'statusCode': 200}
