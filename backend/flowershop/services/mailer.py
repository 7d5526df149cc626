import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flowershop.core.config import settings

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome flower shop"


def send_mail(to_addr: str, subject: str, body: str) -> None:
    if not settings.MAIL_ENABLED:
        logger.info("Mail disabled, not sending '%s' to %s", subject, to_addr)
        return

    msg = MIMEMultipart()
    msg["From"] = settings.MAIL_FROM
    msg["To"] = to_addr
    msg["Subject"] = subject
    msg.attach(MIMEText(body, "plain", "utf-8"))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.starttls()
        if settings.SMTP_USER:
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
        server.sendmail(settings.MAIL_FROM, to_addr, msg.as_string())
    logger.info("Mail successfully sent to %s", to_addr)


def send_welcome_mail(email: str, username: str) -> None:
    """Runs as a background task; a mail failure must never reach the request."""
    body = (
        f"Hi {username},\n\n"
        "You have successfully registered at the flower shop.\n"
    )
    try:
        send_mail(email, WELCOME_SUBJECT, body)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send welcome mail to %s", email)
