"""
Reset code notification senders.

- LoggingNotificationSender: development, logs the message instead of sending
- SmtpNotificationSender: delivers through an SMTP relay
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from libs.result import Error, Result, Return
from src.app.services.notification_sender import INotificationSender, ResetCodeNotification

logger = logging.getLogger(__name__)


def build_reset_email(
    notification: ResetCodeNotification, sender_email: str, service_name: str
) -> EmailMessage:
    """Render the reset code email with a plain-text body and an HTML alternative"""
    message = EmailMessage()
    message["Subject"] = f"Password Reset Code - {service_name}"
    message["From"] = sender_email
    message["To"] = notification.to_email

    message.set_content(
        f"Password Reset Code - {service_name}\n"
        "\n"
        f"You requested a password reset for your account ({notification.masked_email}).\n"
        "\n"
        f"Your reset code is: {notification.code}\n"
        "\n"
        "Enter this code on the password reset page to create a new password.\n"
        "\n"
        f"This code will expire in {notification.expires_in_minutes} minutes.\n"
        "\n"
        "If you didn't request this, please ignore this email.\n"
        "\n"
        "---\n"
        f"{service_name}\n"
    )
    message.add_alternative(
        f"""\
<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #007cba; color: white; padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">
      <h1>Password Reset Code</h1>
    </div>
    <div style="background-color: #f9f9f9; padding: 30px; border-radius: 0 0 8px 8px;">
      <p>Hello,</p>
      <p>You requested a password reset for your {service_name} account ({notification.masked_email}).</p>
      <p>Enter this code on the password reset page:</p>
      <div style="background-color: #007cba; color: white; padding: 20px; text-align: center; font-size: 32px; font-weight: bold; letter-spacing: 8px; border-radius: 5px; margin: 20px 0; font-family: monospace;">{notification.code}</div>
      <p><strong>This code will expire in {notification.expires_in_minutes} minutes.</strong></p>
      <p>If you didn't request this password reset, please ignore this email. Your account remains secure.</p>
      <p style="margin-top: 30px; font-size: 12px; color: #666; border-top: 1px solid #eee; padding-top: 20px;">
        <strong>{service_name}</strong><br>
        Visit our website to complete your password reset.
      </p>
    </div>
  </body>
</html>
""",
        subtype="html",
    )
    return message


class LoggingNotificationSender(INotificationSender):
    """Logs reset emails instead of sending them. The code itself is not logged."""

    def __init__(self, sender_email: str, service_name: str):
        self.sender_email = sender_email
        self.service_name = service_name

    async def send_reset_code(self, notification: ResetCodeNotification) -> Result[None]:
        try:
            message = build_reset_email(notification, self.sender_email, self.service_name)
        except Exception as e:
            logger.exception(f"Could not render reset email for {notification.masked_email}")
            return Return.err(Error("NOTIFICATION_FAILED", f"Could not build reset email: {e}"))

        logger.info(
            f"[email:log] From: {message['From']} To: {notification.masked_email} "
            f"Subject: {message['Subject']}"
        )
        return Return.ok(None)


class SmtpNotificationSender(INotificationSender):
    """Sends reset emails through an SMTP relay on a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        sender_email: str,
        service_name: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender_email = sender_email
        self.service_name = service_name
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send_reset_code(self, notification: ResetCodeNotification) -> Result[None]:
        try:
            message = build_reset_email(notification, self.sender_email, self.service_name)
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            return Return.err(Error("NOTIFICATION_FAILED", f"SMTP delivery failed: {e}"))
        except Exception as e:
            # Malformed recipient headers fail inside the email package
            logger.exception(f"Reset email to {notification.masked_email} failed")
            return Return.err(Error("NOTIFICATION_FAILED", f"Could not send reset email: {e}"))

        return Return.ok(None)

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(message)
