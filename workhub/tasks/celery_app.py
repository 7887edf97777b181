"""Celery app and the email delivery task consumed from the email queue."""

from typing import Any

from celery import Celery

from workhub.core.config import get_settings
from workhub.core.errors import ServiceUnavailableError

settings = get_settings()

celery_app = Celery("workhub", broker=settings.CELERY_BROKER_URL)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_default_queue=settings.EMAIL_QUEUE_NAME,
    # Ack only after the task body returns; a worker crash mid-send redelivers (at-least-once).
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    # Failed sends are rejected, never acknowledged.
    task_acks_on_failure_or_timeout=False,
    worker_prefetch_multiplier=1,
    task_ignore_result=True,
    task_soft_time_limit=60,
    task_time_limit=90,
)


# SMTP outages are retried with backoff; after the last attempt the message is rejected.
EMAIL_MAX_RETRIES = 5


@celery_app.task(
    name="send_notification_email",
    acks_late=True,
    acks_on_failure_or_timeout=False,
    reject_on_worker_lost=True,
    autoretry_for=(ServiceUnavailableError,),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=EMAIL_MAX_RETRIES,
)
def send_notification_email(message: dict[str, Any]) -> None:
    """
    Deliver one verification/reset email over SMTP.

    Duplicate deliveries are tolerable: account state only changes when the
    token in the link is redeemed.
    """
    from workhub.services.notifier import NotificationRequest, SmtpNotifier

    SmtpNotifier(get_settings()).send(NotificationRequest.from_message(message))
