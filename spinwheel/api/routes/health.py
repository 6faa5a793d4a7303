from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from spinwheel.core.config import Settings
from spinwheel.dependencies.settings import get_settings

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    """Configuration status. Reports whether secrets are set, never their values."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.status_flags(),
    }
