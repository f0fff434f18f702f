"""
SMTP delivery of password reset links.
"""
from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Protocol

from core.config import Settings
from core.tokens import RESET_TOKEN_MINUTES

log = logging.getLogger(__name__)


class Notifier(Protocol):
    def send_reset_email(self, to_email: str, token: str) -> None: ...


def _effective_from(email_from: str | None, email_user: str | None, smtp_server: str) -> str:
    # Gmail rewrites or blocks a From that differs from the login user.
    if "gmail" in (smtp_server or "").lower() and email_user:
        return email_user
    return email_from or email_user or "noreply@localhost"


def build_reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={token}"


class SmtpNotifier:
    def __init__(self, settings: Settings):
        self.settings = settings

    def send_text_email(self, to_email: str, subject: str, body: str) -> None:
        s = self.settings
        if not (s.email_user and s.email_password):
            raise RuntimeError("Email credentials not configured. Set EMAIL_USER and EMAIL_PASSWORD.")

        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = _effective_from(s.email_from, s.email_user, s.smtp_server)
        msg["To"] = to_email

        with smtplib.SMTP(s.smtp_server, s.smtp_port) as server:
            server.starttls()
            server.login(s.email_user, s.email_password)
            server.sendmail(msg["From"], [to_email], msg.as_string())

    def send_reset_email(self, to_email: str, token: str) -> None:
        link = build_reset_link(self.settings.frontend_url, token)
        self.send_text_email(
            to_email=to_email,
            subject="Password Reset Request",
            body=(
                f"Use this link to reset your password:\n\n{link}\n\n"
                f"This link expires in {RESET_TOKEN_MINUTES} minutes. "
                "If you did not request this, ignore the email."
            ),
        )


def deliver_reset_email(notifier: Notifier, to_email: str, token: str) -> None:
    """Background task body: failures are logged and never reach the client."""
    try:
        notifier.send_reset_email(to_email, token)
    except Exception:
        log.exception("Failed to send reset email to %s", to_email)
        return
    log.info("Reset email sent to %s", to_email)


__all__ = ["Notifier", "SmtpNotifier", "build_reset_link", "deliver_reset_email"]
