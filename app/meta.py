# app/meta.py  # Router de salud/metadatos para el frontend y los monitores.

from datetime import datetime, timezone
import time

from fastapi import APIRouter, Request

from app.schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Estado del proceso: hora actual (UTC) y segundos desde el arranque."""
    started = getattr(request.app.state, "started_monotonic", time.monotonic())
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - started, 3),
    )
