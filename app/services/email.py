"""
Email delivery

Mailgun's HTTP API is used when MAILGUN_API_KEY and MAILGUN_DOMAIN are set.
SMTP (STARTTLS) is the fallback, and the only transport otherwise.
"""
import html
import logging
import smtplib
from email.message import EmailMessage

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """No transport accepted the message"""


def _send_via_mailgun(to: str, subject: str, html_body: str) -> str:
    response = httpx.post(
        f"{settings.MAILGUN_API_BASE}/{settings.MAILGUN_DOMAIN}/messages",
        auth=("api", settings.MAILGUN_API_KEY),
        data={
            "from": settings.email_from,
            "to": to,
            "subject": subject,
            "html": html_body,
        },
        timeout=settings.EMAIL_TIMEOUT_SECONDS,
    )
    if response.status_code >= 400:
        raise EmailDeliveryError(f"Mailgun API error: {response.status_code} {response.text}")
    return response.json().get("id", "")


def _send_via_smtp(to: str, subject: str, html_body: str) -> None:
    if not settings.EMAIL_USER or not settings.smtp_password:
        raise EmailDeliveryError("SMTP credentials are not configured (EMAIL_USER / EMAIL_PASSWORD)")

    msg = EmailMessage()
    msg["From"] = settings.email_from
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML capable mail client.")
    msg.add_alternative(html_body, subtype="html")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.EMAIL_TIMEOUT_SECONDS) as server:
        server.starttls()
        server.login(settings.EMAIL_USER, settings.smtp_password)
        server.send_message(msg)


def send_email(to: str, subject: str, html_body: str) -> bool:
    """
    Send an HTML email.

    Returns:
        True once a transport accepted the message

    Raises:
        EmailDeliveryError: when every transport failed
    """
    logger.info(f"Sending email to {to}: {subject}")

    if settings.use_mailgun:
        try:
            message_id = _send_via_mailgun(to, subject, html_body)
            logger.info(f"Email sent via Mailgun: {message_id}")
            return True
        except (httpx.HTTPError, EmailDeliveryError) as e:
            logger.error(f"Mailgun failed, falling back to SMTP: {e}")

    try:
        _send_via_smtp(to, subject, html_body)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {to}: {type(e).__name__}: {e}")
        raise EmailDeliveryError(str(e)) from e

    logger.info(f"Email sent via SMTP to {to}")
    return True


_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #ddd; border-radius: 8px; }
    .header { background: #667eea; color: white; padding: 20px; border-radius: 8px 8px 0 0; text-align: center; }
    .content { padding: 20px; }
    .button { display: inline-block; background: #667eea; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; margin: 20px 0; }
    .username-box { background: #f5f5f5; padding: 15px; border-left: 4px solid #667eea; margin: 20px 0; font-family: monospace; font-size: 16px; }
    .footer { font-size: 12px; color: #999; text-align: center; margin-top: 30px; border-top: 1px solid #ddd; padding-top: 20px; }
"""


def _layout(heading: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><style>{_STYLE}</style></head>
<body>
  <div class="container">
    <div class="header"><h2>{heading}</h2></div>
    <div class="content">{body}</div>
    <div class="footer"><p>{html.escape(settings.APP_NAME)}</p></div>
  </div>
</body>
</html>"""


def forgot_password_email_html(username: str, reset_link: str) -> str:
    body = f"""
      <p>Hi {html.escape(username)},</p>
      <p>We received a request to reset your password. Click the button below to create a new password.</p>
      <a href="{html.escape(reset_link, quote=True)}" class="button">Reset Password</a>
      <p>This link will expire in {settings.RESET_TOKEN_EXPIRE_HOURS} hours.</p>
      <p>If you didn't request a password reset, please ignore this email.</p>"""
    return _layout("Reset Your Password", body)


def forgot_username_email_html(username: str) -> str:
    body = f"""
      <p>Hi there,</p>
      <p>Your username for {html.escape(settings.APP_NAME)} is:</p>
      <div class="username-box">{html.escape(username)}</div>
      <p>You can use this username to log in to your account.</p>
      <p>If you didn't request this information, please ignore this email.</p>"""
    return _layout("Your Username", body)
