"""Alert mail delivery for the failover watchdog"""
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
import structlog
from tenacity import Retrying, stop_after_attempt, wait_exponential

from failover.models import AlertEnvelope

logger = structlog.get_logger()


class Notifier:
    """Sends the failure alert to the configured operators"""
    def __init__(self, envelope: AlertEnvelope, mail_host, mail_port, attempts=3, timeout=10):
        self.envelope = envelope
        self.mail_host = mail_host
        self.mail_port = mail_port
        self.attempts = max(1, attempts)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings):
        envelope = AlertEnvelope(
            sender=settings.ALERT_SENDER_EMAIL,
            sender_name=settings.ALERT_SENDER_NAME,
            subject=settings.ALERT_MAIL_TITLE,
            body=settings.ALERT_MAIL_BODY,
            recipients=settings.alert_recipients,
        )
        return cls(envelope, settings.ALERT_MAIL_HOST, settings.ALERT_MAIL_PORT,
                   attempts=settings.ALERT_SEND_ATTEMPTS)

    def send_alert(self) -> int:
        """
        Send the alert mail to every recipient. Never raises.

        Returns:
            Number of recipients the mail was delivered to
        """
        if not self.envelope.recipients:
            logger.warning("No alert recipients configured, skipping alert mail")
            return 0

        delivered = 0
        for recipient in self.envelope.recipients:
            try:
                for attempt in Retrying(
                    stop=stop_after_attempt(self.attempts),
                    wait=wait_exponential(multiplier=1, min=1, max=10),
                    reraise=True
                ):
                    with attempt:
                        self._deliver(recipient)
                delivered += 1
            except Exception as e:
                logger.error("Failed to send alert mail", recipient=recipient, error=str(e))

        logger.info("Sent failure alert mail",
                    delivered=delivered,
                    recipients=len(self.envelope.recipients))
        return delivered

    def _build_message(self, recipient) -> EmailMessage:
        message = EmailMessage()
        if self.envelope.sender_name:
            message["From"] = formataddr((self.envelope.sender_name, self.envelope.sender), charset="utf-8")
        else:
            message["From"] = self.envelope.sender
        message["To"] = recipient
        message["Subject"] = self.envelope.subject
        message.set_content(self.envelope.body, subtype="html", charset="utf-8")
        return message

    def _deliver(self, recipient):
        message = self._build_message(recipient)
        with smtplib.SMTP(self.mail_host, self.mail_port, timeout=self.timeout) as smtp:
            smtp.send_message(message)
