import logging
import smtplib
import ssl
from email.message import EmailMessage

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _deliver(msg: EmailMessage) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=20) as smtp:
        smtp.ehlo()
        if settings.smtp_use_tls:
            smtp.starttls(context=ssl.create_default_context())
            smtp.ehlo()
        if settings.smtp_username and settings.smtp_password:
            smtp.login(settings.smtp_username, settings.smtp_password)
        smtp.send_message(msg)


def send_verification_email(to_email: str, link: str) -> None:
    msg = EmailMessage()
    msg["Subject"] = "Confirm your email address"
    msg["From"] = settings.mail_from
    msg["To"] = to_email
    msg.set_content(
        "Hi,\n\nThanks for registering. Confirm your email address here "
        f"within 24 hours: {link}\n"
    )
    msg.add_alternative(
        f"""<p>Hi,</p>
            <p>Thanks for registering.</p>
            <p>Confirm your email address within 24 hours: <a href=\"{link}\">{link}</a></p>
            <p>If you did not create an account, you can safely ignore this email.</p>""",
        subtype="html",
    )
    try:
        _deliver(msg)
    except (smtplib.SMTPException, OSError):
        # Runs as a background task; the user can always request a resend.
        logger.exception("Failed to send verification email to %s", to_email)
        return
    logger.info("Verification email sent to %s", to_email)
