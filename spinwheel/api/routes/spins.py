"""
Spin endpoints: submit a spin, list recorded spins, publish the reward catalog.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spinwheel.core.config import Settings
from spinwheel.core.rewards import SEGMENTS
from spinwheel.db.session import get_db
from spinwheel.dependencies.settings import get_settings
from spinwheel.models.spin import Spin
from spinwheel.schemas.spin import (
    SegmentListResponse,
    SegmentResponse,
    SpinListResponse,
    SpinRecordResponse,
    SpinRequest,
)
from spinwheel.services.coupon_email import CouponNotice
from spinwheel.services.spin_admission import SpinSubmission, submit_spin
from spinwheel.tasks.notifications import deliver_coupon_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/spin")
def create_spin(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    payload: Optional[SpinRequest] = None,
):
    """
    Record a spin for a new email and schedule the coupon email.
    Refuses repeat emails; the email is sent after the response goes out.
    """
    # An empty body is a missing name/email, not a malformed request
    if payload is None:
        payload = SpinRequest()
    logger.info("New spin request - name: %s, email: %s, domain: %s", payload.name, payload.email, payload.domain)

    def schedule_email(notice: CouponNotice) -> None:
        background_tasks.add_task(deliver_coupon_email, settings, notice)

    decision = submit_spin(
        db,
        SpinSubmission(
            name=payload.name,
            email=payload.email,
            domain=payload.domain,
            discount=payload.discount,
            coupon_code=payload.coupon_code,
        ),
        catalog_strict=settings.reward_catalog_strict,
        on_issued=schedule_email,
    )
    return JSONResponse(status_code=decision.status_code, content=decision.to_payload())


@router.get("/spins", response_model=SpinListResponse)
def list_spins(db: Session = Depends(get_db)):
    """All recorded spins, newest first."""
    try:
        spins = db.query(Spin).order_by(Spin.created_at.desc(), Spin.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error("Error fetching spins: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return SpinListResponse(
        count=len(spins),
        spins=[SpinRecordResponse.model_validate(spin) for spin in spins],
    )


@router.get("/segments", response_model=SegmentListResponse)
def list_segments():
    """The reward catalog the wheel is drawn from."""
    return SegmentListResponse(
        count=len(SEGMENTS),
        segments=[SegmentResponse.model_validate(segment) for segment in SEGMENTS],
    )
