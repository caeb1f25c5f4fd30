from fastapi import APIRouter
from datetime import datetime, timezone

from assetline.config import SERVICE_NAME

router = APIRouter()
_started = datetime.now(timezone.utc)

@router.get("/")
def health():
    now = datetime.now(timezone.utc)
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "time": now.isoformat().replace("+00:00", "Z"),
        "uptimeSec": int((now - _started).total_seconds()),
        "version": "v0.1.0"
    }
