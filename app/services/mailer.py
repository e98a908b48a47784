"""Outbound email relay for the contact form and the password-reset notice."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from functools import lru_cache
from typing import TYPE_CHECKING

from app.core.config import get_settings
from app.core.errors import MailDeliveryError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

RESET_NOTICE_SUBJECT = "Reset Your Password"
RESET_NOTICE_BODY = (
    "Hello,\n\n"
    "We received a request to reset the password for this address.\n"
    "Please contact the site administrator to complete the reset.\n\n"
    "Best regards"
)


def format_contact_message(
    name: str,
    email: str,
    message: str,
    phone: str | None = None,
    postal_code: str | None = None,
    objectif: str | None = None,
) -> str:
    """Plain-text body for a contact-form submission."""
    missing = "Non renseigné"
    return (
        "Nouveau message reçu depuis le formulaire :\n\n"
        f"Nom complet : {name}\n"
        f"E-mail : {email}\n"
        f"Téléphone : {phone or missing}\n"
        f"Code postal : {postal_code or missing}\n"
        f"Objectif : {objectif or missing}\n\n"
        f"Message :\n{message}\n"
    )


class Mailer:
    """Sends plain-text mail through the configured SMTP server."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def configured(self) -> bool:
        return bool(self.settings.SMTP_HOST and self.settings.SMTP_FROM)

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        reply_to: str | None = None,
    ) -> None:
        """Deliver one message; raises MailDeliveryError on any failure."""
        if not self.configured:
            raise MailDeliveryError("Email delivery is not configured.")
        s = self.settings

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = s.SMTP_FROM
        msg["To"] = to
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(body)

        password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else ""
        try:
            if s.SMTP_USE_SSL:
                with smtplib.SMTP_SSL(
                    s.SMTP_HOST,
                    s.SMTP_PORT,
                    timeout=s.SMTP_TIMEOUT_SEC,
                    context=ssl.create_default_context(),
                ) as client:
                    if s.SMTP_USER:
                        client.login(s.SMTP_USER, password)
                    client.send_message(msg)
            else:
                with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as client:
                    if s.SMTP_USE_TLS:
                        client.starttls(context=ssl.create_default_context())
                    if s.SMTP_USER:
                        client.login(s.SMTP_USER, password)
                    client.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email delivery failed: subject=%r error=%s", subject, e)
            raise MailDeliveryError("Failed to send email.") from e
        logger.info("Email sent", extra={"mail_subject": subject})


@lru_cache
def get_mailer() -> Mailer:
    return Mailer(get_settings())
