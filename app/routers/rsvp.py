# app/routers/rsvp.py

# =================================================================================
# 💌 Router: envío público de RSVP
# ---------------------------------------------------------------------------------
# POST /api/rsvp → 201 con {message, id}.
# Los rechazos del motor (400/403/409/500) los traduce el handler global de main.py.
# =================================================================================

from fastapi import APIRouter, Depends, Request, status

from app import schemas
from app.db import get_engine
from app.ledger import RSVPEngine
from app.models import AttendingEnum

router = APIRouter(
    prefix="/api",
    tags=["rsvp"],
    responses=schemas.error_responses(400, 403, 409, 500),
)

THANKS_ATTENDING = "Thank you for your RSVP! We can't wait to celebrate with you!"
THANKS_DECLINED = "Thank you for letting us know. We'll miss you on our special day!"


def _client_ip(request: Request) -> str:
    """IP de origen (best-effort): primer salto de X-Forwarded-For o la del socket."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@router.post(
    "/rsvp",
    response_model=schemas.RSVPCreated,
    status_code=status.HTTP_201_CREATED,
)
def submit_rsvp(
    payload: schemas.RSVPSubmission,
    request: Request,
    engine: RSVPEngine = Depends(get_engine),
):
    record = engine.submit_rsvp(payload, ip_address=_client_ip(request))
    message = THANKS_ATTENDING if record.attending == AttendingEnum.yes else THANKS_DECLINED
    return schemas.RSVPCreated(message=message, id=record.id)
