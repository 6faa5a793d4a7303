"""
Send the coupon email to a spin winner.
Uses Resend if RESEND_API_KEY is set, otherwise Gmail SMTP if credentials are set;
with neither it is a no-op so a spin never fails because of email.
"""
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from html import escape
from typing import Optional

import requests

from spinwheel.core.config import Settings

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class CouponNotice:
    name: str
    email: str  # As typed by the visitor, not normalized
    domain: Optional[str]
    discount: Optional[float]
    coupon_code: Optional[str]


@dataclass(frozen=True)
class EmailResult:
    success: bool
    error: Optional[str] = None
    message_id: Optional[str] = None


class NotificationError(Exception):
    """A coupon email could not be delivered."""


def _format_discount(discount) -> str:
    if isinstance(discount, float) and discount.is_integer():
        return str(int(discount))
    return str(discount)


def build_subject(settings: Settings) -> str:
    return f"🎉 Your {settings.sender_name} Discount Coupon!"


def build_html(settings: Settings, notice: CouponNotice) -> str:
    brand = escape(settings.sender_name)
    return f"""
    <div style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; max-width: 600px; margin: 0 auto; background: linear-gradient(135deg, #1a1a2e 0%, #16213e 100%); padding: 40px; border-radius: 16px;">
        <h1 style="color: #00f2ff; text-align: center; font-size: 28px; margin-bottom: 10px;">🎊 Congratulations, {escape(notice.name)}!</h1>
        <p style="color: #ffffff; text-align: center; font-size: 18px; margin-bottom: 30px;">You just won a special discount from {brand}!</p>
        <div style="background: linear-gradient(135deg, #2a2a40 0%, #3a3a55 100%); padding: 30px; border-radius: 12px; text-align: center; border: 2px solid #00f2ff; margin-bottom: 30px;">
            <p style="color: #bd00ff; font-size: 24px; font-weight: bold; margin: 0 0 10px 0;">{escape(_format_discount(notice.discount))}% OFF</p>
            <p style="color: #ffffff; font-size: 16px; margin: 0 0 20px 0;">on {escape(str(notice.domain or ""))}</p>
            <div style="background: #1a1a2e; padding: 15px 30px; border-radius: 8px; display: inline-block;">
                <span style="color: #00f2ff; font-size: 28px; font-weight: bold; letter-spacing: 3px;">{escape(str(notice.coupon_code or ""))}</span>
            </div>
        </div>
        <p style="color: #aaaaaa; text-align: center; font-size: 14px;">Show this email at the {brand} desk to redeem your discount.</p>
        <hr style="border: none; border-top: 1px solid #333; margin: 30px 0;">
        <p style="color: #666666; text-align: center; font-size: 12px;">Best regards,<br><strong style="color: #00f2ff;">{brand} Team</strong></p>
    </div>
    """.strip()


def build_text(settings: Settings, notice: CouponNotice) -> str:
    return (
        f"Congratulations, {notice.name}!\n\n"
        f"You just won {_format_discount(notice.discount)}% OFF on {notice.domain or ''}.\n"
        f"Your coupon code: {notice.coupon_code or ''}\n\n"
        f"Show this email at the {settings.sender_name} desk to redeem your discount.\n"
    )


def _send_via_resend(settings: Settings, notice: CouponNotice) -> str:
    headers = {
        "Authorization": f"Bearer {settings.resend_api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "from": formataddr((settings.sender_name, settings.sender_email)),
        "to": [notice.email],
        "subject": build_subject(settings),
        "html": build_html(settings, notice),
        "text": build_text(settings, notice),
    }
    try:
        response = requests.post(RESEND_URL, json=payload, headers=headers, timeout=settings.email_timeout)
    except requests.exceptions.RequestException as e:
        raise NotificationError(f"Resend request failed: {e}") from e

    if response.status_code != 200:
        try:
            error_msg = response.json().get("message", "Unknown error")
        except ValueError:
            error_msg = response.text or "Unknown error"
        raise NotificationError(f"Resend API error {response.status_code}: {error_msg}")
    # Resend already accepted the email; a malformed body only costs us the id
    try:
        body = response.json()
    except ValueError:
        return ""
    return body.get("id", "") if isinstance(body, dict) else ""


def _send_via_smtp(settings: Settings, notice: CouponNotice) -> str:
    message = EmailMessage()
    message["From"] = formataddr((settings.sender_name, settings.sender_email or settings.gmail_user))
    message["To"] = notice.email
    message["Subject"] = build_subject(settings)
    message["Message-ID"] = make_msgid()
    message.set_content(build_text(settings, notice))
    message.add_alternative(build_html(settings, notice), subtype="html")

    try:
        # timeout bounds the connect and every blocking read, including the STARTTLS handshake
        smtp = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.email_timeout)
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(f"SMTP connection failed: {e}") from e

    try:
        smtp.starttls()
        smtp.login(settings.gmail_user, settings.gmail_app_password)
        smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise NotificationError(f"SMTP delivery failed: {e}") from e
    finally:
        try:
            smtp.quit()
        except (smtplib.SMTPException, OSError):
            smtp.close()
    return message["Message-ID"]


def send_coupon_email(settings: Settings, notice: CouponNotice) -> EmailResult:
    """
    Deliver the coupon email once.
    Never raises: failures are logged and reported in the returned EmailResult.
    """
    logger.info("Attempting to send coupon email to %s", notice.email)

    if not notice.email:
        logger.warning("❌ No email provided, skipping email send.")
        return EmailResult(success=False, error="No email provided")

    transport = settings.email_transport
    if transport is None:
        logger.warning(
            "❌ Email transport not configured (GMAIL_USER: %s, GMAIL_APP_PASSWORD: %s, RESEND_API_KEY: %s)",
            "set" if settings.gmail_user else "MISSING",
            "set" if settings.gmail_app_password else "MISSING",
            "set" if settings.resend_api_key else "MISSING",
        )
        return EmailResult(success=False, error="Email transport not configured")

    try:
        if transport == "resend":
            message_id = _send_via_resend(settings, notice)
        else:
            message_id = _send_via_smtp(settings, notice)
    except NotificationError as e:
        logger.error("❌ Email error for %s via %s: %s", notice.email, transport, e)
        return EmailResult(success=False, error=str(e))

    logger.info("✅ Email sent to %s via %s (message id: %s)", notice.email, transport, message_id)
    return EmailResult(success=True, message_id=message_id)
