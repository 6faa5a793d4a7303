"""
Spin Admission Service
Decides whether a submission may receive a coupon and records the issuance.
One spin per normalized email, enforced by the unique constraint on spins.email.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from spinwheel.core.rewards import find_segment
from spinwheel.models.spin import Spin
from spinwheel.services.coupon_email import CouponNotice

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS_MESSAGE = "Name and Email are required."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
UNKNOWN_REWARD_MESSAGE = "Unknown reward segment."
ALREADY_CLAIMED_MESSAGE = "You have already spun the wheel with this email address."


class DecisionReason(str, Enum):
    INVALID_INPUT = "invalid_input"
    ALREADY_CLAIMED = "already_claimed"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class SpinSubmission:
    name: Optional[str]
    email: Optional[str]
    domain: Optional[str] = None
    discount: Optional[float] = None
    coupon_code: Optional[str] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DecisionReason] = None
    message: Optional[str] = None
    detail: Optional[str] = None
    spin: Optional[Spin] = None

    @property
    def status_code(self) -> int:
        if self.reason == DecisionReason.INVALID_INPUT:
            return 400
        if self.reason == DecisionReason.STORAGE_ERROR:
            return 500
        return 200

    def to_payload(self) -> Dict[str, Any]:
        if self.allowed:
            return {"allowed": True, "success": True}
        return {"allowed": False, "message": self.message}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _reject(reason: DecisionReason, message: str, detail: Optional[str] = None) -> Decision:
    return Decision(allowed=False, reason=reason, message=message, detail=detail)


def _storage_error(db: Session, error: SQLAlchemyError) -> Decision:
    db.rollback()
    detail = str(getattr(error, "orig", None) or error)
    logger.error("Database error: %s", detail)
    return _reject(DecisionReason.STORAGE_ERROR, f"Database Error: {detail}", detail)


def validate_submission(submission: SpinSubmission, catalog_strict: bool = False) -> Optional[Decision]:
    """Return a rejecting Decision for malformed input, None when the submission is acceptable."""
    name = submission.name if isinstance(submission.name, str) else ""
    email = submission.email if isinstance(submission.email, str) else ""

    # A whitespace-only email is present but malformed
    if not name.strip() or not email:
        return _reject(DecisionReason.INVALID_INPUT, MISSING_FIELDS_MESSAGE)

    # Validated untrimmed: surrounding whitespace is an invalid address, not a typo to repair
    if not validate_email(email):
        return _reject(DecisionReason.INVALID_INPUT, INVALID_EMAIL_MESSAGE)

    if catalog_strict and find_segment(submission.domain, submission.discount, submission.coupon_code) is None:
        return _reject(DecisionReason.INVALID_INPUT, UNKNOWN_REWARD_MESSAGE)

    return None


def submit_spin(
    db: Session,
    submission: SpinSubmission,
    *,
    catalog_strict: bool = False,
    on_issued: Optional[Callable[[CouponNotice], None]] = None,
) -> Decision:
    """
    Admit or refuse one spin.

    Returns Decision(allowed=True) after the spin is committed, otherwise a refusal
    carrying INVALID_INPUT, ALREADY_CLAIMED or STORAGE_ERROR. On success `on_issued`
    is handed the coupon notice to schedule; it must not block, and anything it
    raises is logged and ignored.
    """
    rejection = validate_submission(submission, catalog_strict)
    if rejection is not None:
        return rejection

    normalized_email = normalize_email(submission.email)

    try:
        # Fast path only; the unique constraint below is the real guard
        existing = db.query(Spin.id).filter(Spin.email == normalized_email).first()
    except SQLAlchemyError as e:
        return _storage_error(db, e)

    if existing:
        logger.info("❌ Email %s already used.", normalized_email)
        return _reject(DecisionReason.ALREADY_CLAIMED, ALREADY_CLAIMED_MESSAGE)

    spin = Spin(
        name=submission.name,
        email=normalized_email,
        domain=submission.domain,
        discount=submission.discount,
        coupon_code=submission.coupon_code,
    )
    try:
        db.add(spin)
        db.flush()
        spin_id = spin.id
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent submission for the same email
        db.rollback()
        logger.info("❌ Email %s already used (concurrent submission).", normalized_email)
        return _reject(DecisionReason.ALREADY_CLAIMED, ALREADY_CLAIMED_MESSAGE)
    except SQLAlchemyError as e:
        return _storage_error(db, e)

    logger.info("✅ Spin saved for %s (id=%s)", normalized_email, spin_id)

    try:
        # Detach a loaded copy so callers can read it after the session closes
        db.refresh(spin)
        db.expunge(spin)
    except SQLAlchemyError as e:
        # The spin is committed; only the returned copy is lost
        logger.warning("Could not reload spin %s after commit: %s", spin_id, e)
        spin = None

    if on_issued is not None:
        notice = CouponNotice(
            name=submission.name,
            email=submission.email,
            domain=submission.domain,
            discount=submission.discount,
            coupon_code=submission.coupon_code,
        )
        try:
            on_issued(notice)
        except Exception:
            logger.exception("Failed to schedule coupon email for %s", normalized_email)

    return Decision(allowed=True, spin=spin)
