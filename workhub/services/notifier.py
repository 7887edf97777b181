"""Outbound verification/reset emails: inline SMTP, Celery queue hand-off, or log-only."""

import html
import logging
import smtplib
from dataclasses import asdict, dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING, Any, Protocol

from kombu.exceptions import OperationalError as BrokerOperationalError

from workhub.core.errors import ServiceUnavailableError
from workhub.models import TokenType

if TYPE_CHECKING:
    from workhub.core.config import Settings

logger = logging.getLogger(__name__)

SUBJECTS = {
    TokenType.RESET_PASSWORD: "Reset Password",
    TokenType.EMAIL_VERIFICATION: "Activation link",
}


@dataclass(frozen=True)
class NotificationRequest:
    """One email to deliver. Also the JSON message body on the queue."""

    email: str
    username: str
    type: TokenType
    link: str

    def to_message(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_message(cls, data: dict[str, Any]) -> "NotificationRequest":
        return cls(
            email=data["email"],
            username=data["username"],
            type=TokenType(data["type"]),
            link=data["link"],
        )


class Notifier(Protocol):
    def send(self, request: NotificationRequest) -> None: ...


def _build_subject(app_name: str, token_type: TokenType) -> str:
    return f"{app_name}! {SUBJECTS[token_type]}"


def _build_text_email(request: NotificationRequest) -> str:
    lines = [f"Hi {request.username},", ""]
    if request.type == TokenType.RESET_PASSWORD:
        lines.append("Use the link below to reset your password. It expires in 15 minutes.")
    else:
        lines.append("Use the link below to activate your account. It expires in 24 hours.")
    lines.extend(["", request.link, "", "If you did not request this, ignore this email."])
    return "\n".join(lines)


def _build_html_email(request: NotificationRequest) -> str:
    name = html.escape(request.username)
    link = html.escape(request.link, quote=True)
    if request.type == TokenType.RESET_PASSWORD:
        action = "reset your password"
        label = "Reset password"
    else:
        action = "activate your account"
        label = "Activate account"
    return (
        "<html><body>"
        f"<p>Hi {name},</p>"
        f"<p>Click the button below to {action}.</p>"
        f'<p><a href="{link}" style="padding:8px 16px;background:#2563eb;color:#fff;'
        f'text-decoration:none;border-radius:4px">{label}</a></p>'
        "<p>If you did not request this, ignore this email.</p>"
        "</body></html>"
    )


class SmtpNotifier:
    """Sends the email inline. Any SMTP or socket failure becomes ServiceUnavailableError."""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings

    def send(self, request: NotificationRequest) -> None:
        settings = self.settings
        if not settings.SMTP_HOST:
            raise ServiceUnavailableError("Email delivery is not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = _build_subject(settings.APP_NAME, request.type)
        msg["From"] = settings.SMTP_FROM
        msg["To"] = request.email
        msg.attach(MIMEText(_build_text_email(request), "plain"))
        msg.attach(MIMEText(_build_html_email(request), "html"))

        try:
            with smtplib.SMTP(
                settings.SMTP_HOST,
                settings.SMTP_PORT,
                timeout=settings.SMTP_TIMEOUT_SEC,
            ) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USER:
                    password = (
                        settings.SMTP_PASSWORD.get_secret_value()
                        if settings.SMTP_PASSWORD is not None
                        else ""
                    )
                    server.login(settings.SMTP_USER, password)
                server.sendmail(settings.SMTP_FROM, [request.email], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_send_failed: type=%s error=%s", request.type.value, exc)
            raise ServiceUnavailableError("Email delivery failed") from exc
        logger.info("email_sent: type=%s", request.type.value)


class QueueNotifier:
    """Hands the message to the Celery worker and returns without waiting for delivery."""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings

    def send(self, request: NotificationRequest) -> None:
        from workhub.tasks.celery_app import send_notification_email

        try:
            send_notification_email.apply_async(
                args=[request.to_message()],
                queue=self.settings.EMAIL_QUEUE_NAME,
            )
        except BrokerOperationalError as exc:
            logger.error("email_enqueue_failed: type=%s error=%s", request.type.value, exc)
            raise ServiceUnavailableError("Error adding mail to queue") from exc
        logger.info("email_enqueued: type=%s", request.type.value)


class LogNotifier:
    """Development notifier: logs the link instead of sending anything."""

    def send(self, request: NotificationRequest) -> None:
        logger.info(
            "email_not_sent (EMAIL_DELIVERY=log): to=%s type=%s link=%s",
            request.email,
            request.type.value,
            request.link,
        )


def build_notifier(settings: "Settings") -> Notifier:
    """Select the notifier for EMAIL_DELIVERY."""
    if settings.EMAIL_DELIVERY == "smtp":
        return SmtpNotifier(settings)
    if settings.EMAIL_DELIVERY == "log":
        return LogNotifier()
    return QueueNotifier(settings)
