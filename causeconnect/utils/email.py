"""
Email Utility

Helper functions for sending emails.
"""

import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List
import logging

from causeconnect.core.config import settings

logger = logging.getLogger(__name__)


def send_email(
    recipients: List[str],
    subject: str,
    content: str,
    content_type: str = "plain"
) -> bool:
    """
    Send an email using SMTP settings from config.

    Args:
        recipients: List of email addresses
        subject: Email subject
        content: Email body
        content_type: "plain" or "html"

    Returns:
        True if successful, False otherwise
    """
    if not settings.SMTP_SERVER or not settings.SMTP_EMAIL:
        logger.warning(f"SMTP settings not configured. Email '{subject}' to {recipients} not sent.")
        return False

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.SMTP_EMAIL
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(content, content_type))

        port = int(settings.SMTP_PORT) if settings.SMTP_PORT else 587

        with smtplib.SMTP(settings.SMTP_SERVER, port) as server:
            server.starttls()
            if settings.SMTP_PASSWORD:
                server.login(settings.SMTP_EMAIL, settings.SMTP_PASSWORD)
            server.send_message(msg)

        logger.info(f"Email sent to {recipients}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email: {e}")
        return False


def send_password_reset_code(email: str, code: str, expires_in_minutes: int = 15) -> bool:
    """
    Send a password reset code email.

    Args:
        email: User email address
        code: 6-digit reset code
        expires_in_minutes: Code expiration time in minutes
    """
    subject = f"Password Reset Code - {settings.PROJECT_NAME}"

    html_content = f"""
    <!DOCTYPE html>
    <html lang="en">
    <body style="margin:0;padding:0;background-color:#f3f4f6;font-family:Helvetica,Arial,sans-serif;color:#111827;">
      <table width="100%" cellpadding="0" cellspacing="0" role="presentation">
        <tr>
          <td align="center" style="padding:40px 16px;">
            <table width="100%" cellpadding="0" cellspacing="0"
                   style="max-width:560px;background:#ffffff;border-radius:12px;overflow:hidden;">
              <tr>
                <td style="background:#16a34a;padding:28px;text-align:center;">
                  <h1 style="margin:0;font-size:22px;color:#ffffff;">{settings.PROJECT_NAME}</h1>
                </td>
              </tr>
              <tr>
                <td style="padding:28px;">
                  <h2 style="margin-top:0;font-size:19px;">Reset your password</h2>
                  <p style="font-size:15px;color:#374151;line-height:1.6;">
                    We received a request to reset the password for your account.
                    Enter the code below to choose a new one.
                  </p>
                  <div style="margin:24px 0;padding:18px;text-align:center;background:#f0fdf4;
                              border:2px dashed #16a34a;border-radius:10px;">
                    <span style="font-size:34px;font-weight:700;letter-spacing:10px;color:#15803d;
                                 font-family:'Courier New',monospace;">{code}</span>
                  </div>
                  <p style="font-size:14px;color:#92400e;">
                    This code expires in <strong>{expires_in_minutes} minutes</strong>.
                  </p>
                  <p style="font-size:14px;color:#6b7280;">
                    If you didn't request this, you can ignore this email.
                  </p>
                </td>
              </tr>
            </table>
          </td>
        </tr>
      </table>
    </body>
    </html>
    """

    return send_email([email], subject, html_content, content_type="html")
