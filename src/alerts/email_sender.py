"""
PetAlert - Email Sender
Sends found-pet emails using SMTP.
"""

import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Dict, Any, Optional
from dataclasses import dataclass

from src.alerts.notification import NotificationIntent
from src.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class EmailConfig:
    """Email server configuration."""
    smtp_host: str
    smtp_port: int
    username: str
    password: str
    from_address: str
    from_name: str = "PetAlert"
    use_tls: bool = True


class EmailSender:
    """Sends emails via SMTP."""

    def __init__(self, config: Optional[EmailConfig] = None):
        """
        Initialize email sender.

        Args:
            config: Email configuration (uses settings if not provided)
        """
        if config:
            self.config = config
        else:
            self.config = EmailConfig(
                smtp_host=settings.smtp_host,
                smtp_port=settings.smtp_port,
                username=settings.smtp_user or "",
                password=settings.smtp_password or "",
                from_address=settings.smtp_user or settings.notification_from_address,
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.config.username and self.config.password)

    def send_email(
        self,
        to_addresses: List[str],
        subject: str,
        body_text: str,
        body_html: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send an email.

        Args:
            to_addresses: List of recipient email addresses
            subject: Email subject
            body_text: Plain text body
            body_html: Optional HTML body

        Returns:
            Dictionary with send results
        """
        if not self.is_configured:
            return {
                "success": False,
                "error": "Email credentials not configured",
                "sent_to": [],
            }

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.config.from_name} <{self.config.from_address}>"
            msg["To"] = ", ".join(to_addresses)

            msg.attach(MIMEText(body_text, "plain", "utf-8"))
            if body_html:
                msg.attach(MIMEText(body_html, "html", "utf-8"))

            with smtplib.SMTP(self.config.smtp_host, self.config.smtp_port) as server:
                if self.config.use_tls:
                    server.starttls()
                server.login(self.config.username, self.config.password)
                server.sendmail(
                    self.config.from_address,
                    to_addresses,
                    msg.as_string()
                )

            return {
                "success": True,
                "sent_to": to_addresses,
                "subject": subject,
            }

        except smtplib.SMTPAuthenticationError:
            return {
                "success": False,
                "error": "SMTP authentication failed",
                "sent_to": [],
            }
        except (smtplib.SMTPException, OSError) as e:
            return {
                "success": False,
                "error": f"SMTP error: {str(e)}",
                "sent_to": [],
            }


def generate_found_pet_email_html(intent: NotificationIntent) -> str:
    """
    Generate HTML email telling an owner their pet was found.

    Args:
        intent: Notification intent

    Returns:
        HTML email content
    """
    finder_rows = ""
    for label, value in (
        ("Found by", intent.finder_name),
        ("Email", intent.finder_email),
        ("Phone", intent.finder_phone),
    ):
        if value:
            finder_rows += f"""
                    <tr>
                        <td style="padding: 8px; border-bottom: 1px solid #ddd;"><strong>{label}:</strong></td>
                        <td style="padding: 8px; border-bottom: 1px solid #ddd;">{html.escape(value)}</td>
                    </tr>"""

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; margin: 0; padding: 0;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <div style="background-color: #16a34a; color: white; padding: 20px;
                        text-align: center; border-radius: 8px 8px 0 0;">
                <h1 style="margin: 0; font-size: 24px;">PetAlert</h1>
            </div>

            <div style="background-color: #f8f9fa; padding: 20px; border: 1px solid #ddd;">
                <h2 style="color: #333; margin-top: 0;">{html.escape(intent.subject)}</h2>
                <p>{html.escape(intent.message)}</p>

                <table style="width: 100%; border-collapse: collapse;">
                    <tr>
                        <td style="padding: 8px; border-bottom: 1px solid #ddd;"><strong>Location:</strong></td>
                        <td style="padding: 8px; border-bottom: 1px solid #ddd;">{html.escape(intent.location)}</td>
                    </tr>{finder_rows}
                </table>

                <div style="margin-top: 20px; text-align: center;">
                    <a href="https://www.google.com/maps?q={intent.latitude},{intent.longitude}"
                       style="display: inline-block; background-color: #16a34a; color: white;
                              padding: 12px 24px; text-decoration: none; border-radius: 4px;
                              font-weight: bold;">
                        View on Map
                    </a>
                </div>
            </div>
        </div>
    </body>
    </html>
    """


class EmailNotifier:
    """Delivers found-pet notifications to the owner by email."""

    def __init__(self, sender: Optional[EmailSender] = None):
        self.sender = sender or EmailSender()

    @property
    def is_configured(self) -> bool:
        return self.sender.is_configured

    def send(self, intent: NotificationIntent) -> Dict[str, Any]:
        return self.sender.send_email(
            to_addresses=[intent.owner_email],
            subject=intent.subject,
            body_text=intent.message,
            body_html=generate_found_pet_email_html(intent),
        )
