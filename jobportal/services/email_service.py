"""
Email Service - verification and new password mails.

Without SMTP credentials nothing is sent: the mail (and the link or
password it carries) is written to the log so local development still works.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from jobportal.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _html_layout(title: str, color: str, first_name: str, body_html: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
      <head><meta charset="utf-8"></head>
      <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: {color}; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
          <h1 style="color: white; margin: 0;">{title}</h1>
        </div>
        <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; border: 1px solid #e5e7eb;">
          <p style="font-size: 16px;">Hello {first_name or 'User'},</p>
          {body_html}
        </div>
      </body>
    </html>
    """


def _link_block(url: str, label: str, color: str) -> str:
    return f"""
          <div style="text-align: center; margin: 30px 0;">
            <a href="{url}" style="background: {color}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">{label}</a>
          </div>
          <p style="font-size: 14px; color: #6b7280;">Or copy and paste this link into your browser:</p>
          <p style="font-size: 12px; color: #9ca3af; word-break: break-all;">{url}</p>
    """


def send_email(to_email: str, subject: str, html: str, text: str, settings: Settings = None) -> None:
    """Send one mail over SMTP. Raises on SMTP failure."""
    settings = settings or get_settings()

    msg = EmailMessage()
    msg["From"] = settings.mail_from
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")

    context = ssl.create_default_context()
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=20) as smtp:
        smtp.ehlo()
        if settings.smtp_use_tls:
            smtp.starttls(context=context)
            smtp.ehlo()
        smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.send_message(msg)


def send_verification_email(email: str, token: str, first_name: str) -> None:
    """Mail the verification link. Failures are logged, never raised."""
    settings = get_settings()
    url = f"{settings.base_url}/verify-email/{token}"
    minutes = settings.email_token_minutes

    if not settings.smtp_configured:
        logger.info("[DEV] Verification email for %s: %s", email, url)
        return

    html = _html_layout(
        "Email Verification",
        "#10b981",
        first_name,
        "<p>Thank you for registering! Please verify your email address by clicking the button below:</p>"
        + _link_block(url, "Verify Email", "#10b981")
        + f"<p style=\"font-size: 14px; color: #6b7280;\">This link will expire in {minutes} minutes.</p>",
    )
    text = (
        f"Hello {first_name},\n\n"
        f"Thank you for registering! Please verify your email address by opening the link below:\n\n"
        f"{url}\n\nThis link will expire in {minutes} minutes.\n\n"
        "If you didn't create an account, please ignore this email.\n"
    )
    try:
        send_email(email, "Verify Your Email Address", html, text, settings)
        logger.info("Verification email sent to %s", email)
    except Exception as e:
        logger.error("Error sending verification email to %s: %s", email, e)


def send_new_password_email(email: str, new_password: str, first_name: str, reset_token: str = "") -> bool:
    """
    Mail a freshly generated password, plus a link for choosing a new one.

    Returns True once the mail is out (or logged in dev mode). SMTP errors
    propagate so the caller can keep the old password.
    """
    settings = get_settings()
    url = f"{settings.base_url}/reset-password/{reset_token}" if reset_token else ""

    if not settings.smtp_configured:
        logger.info("[DEV] New password email for %s: %s %s", email, new_password, url)
        return True

    body_html = (
        "<p>We received a request to reset your password. You can now log in using the new password below:</p>"
        "<div style=\"background: #e0f2fe; border: 1px dashed #38bdf8; padding: 16px; border-radius: 8px; text-align: center; margin: 24px 0;\">"
        f"<p style=\"font-size: 20px; font-weight: bold; letter-spacing: 1px;\">{new_password}</p></div>"
        "<p style=\"font-size: 14px; color: #6b7280;\">For security, we recommend changing this password after logging in.</p>"
    )
    text = (
        f"Hello {first_name or 'User'},\n\n"
        "We received a request to reset your password. You can now log in using the new password below:\n\n"
        f"{new_password}\n\n"
        "For security, we recommend changing this password after logging in.\n"
    )
    if url:
        body_html += (
            "<p>Prefer to pick your own? Use this link:</p>"
            + _link_block(url, "Choose Password", "#3b82f6")
            + f"<p style=\"font-size: 14px; color: #6b7280;\">This link will expire in {settings.email_token_minutes} minutes.</p>"
        )
        text += f"\nPrefer to pick your own? Open {url} (expires in {settings.email_token_minutes} minutes).\n"

    html = _html_layout("Password Reset Successful", "#3b82f6", first_name, body_html)
    send_email(email, "Your New Password", html, text, settings)
    logger.info("New password email sent to %s", email)
    return True
