import logging

from spinwheel.core.config import Settings
from spinwheel.services.coupon_email import CouponNotice, EmailResult, send_coupon_email

logger = logging.getLogger(__name__)


def deliver_coupon_email(settings: Settings, notice: CouponNotice) -> EmailResult:
    """
    Background job: runs after the spin response has been sent.
    Nothing is awaiting it, so every failure ends here in the log.
    """
    try:
        result = send_coupon_email(settings, notice)
    except Exception as e:
        logger.exception("Coupon email job crashed for %s", notice.email)
        return EmailResult(success=False, error=str(e))

    if not result.success:
        logger.warning("Coupon email for %s not delivered: %s", notice.email, result.error)
    return result
