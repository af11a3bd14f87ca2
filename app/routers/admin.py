# app/routers/admin.py
# =============================================================================
# 👑 Rutas de administración: RSVPs y lista de invitados
# - Protegido con contraseña admin (`?password=` o cabecera `x-admin-key`).
# - La comprobación la hace el motor, antes de leer o escribir nada.
# - GET    /api/admin                  → resumen + RSVPs
# - DELETE /api/admin/rsvp/{id}        → borra un RSVP
# - GET    /api/admin/guests           → lista de invitados
# - POST   /api/admin/guests           → añade invitado
# - DELETE /api/admin/guests/{name}    → elimina invitado
# =============================================================================

from typing import Optional

from fastapi import APIRouter, Depends

import app.schemas as schemas
from app.core.security import admin_credential
from app.db import get_engine
from app.ledger import RSVPEngine

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    responses=schemas.error_responses(400, 401, 404, 500),
)


@router.get("", response_model=schemas.RSVPSummary)
def list_rsvps(
    credential: Optional[str] = Depends(admin_credential),
    engine: RSVPEngine = Depends(get_engine),
):
    return schemas.RSVPSummary(**engine.list_rsvps(credential))


@router.delete("/rsvp/{rsvp_id}", response_model=schemas.RSVPDeleted)
def delete_rsvp(
    rsvp_id: str,
    credential: Optional[str] = Depends(admin_credential),
    engine: RSVPEngine = Depends(get_engine),
):
    removed = engine.delete_rsvp(rsvp_id, credential)
    return schemas.RSVPDeleted(deletedRsvp=schemas.DeletedRSVP(id=removed.id, names=removed.names))


@router.get("/guests", response_model=schemas.GuestListResponse)
def list_guests(
    credential: Optional[str] = Depends(admin_credential),
    engine: RSVPEngine = Depends(get_engine),
):
    guests = engine.list_guests(credential)
    return schemas.GuestListResponse(guests=guests, total=len(guests))


@router.post("/guests", response_model=schemas.GuestAdded)
def add_guest(
    payload: schemas.GuestNamePayload,
    credential: Optional[str] = Depends(admin_credential),
    engine: RSVPEngine = Depends(get_engine),
):
    guest, total = engine.add_guest(payload.name, credential)
    return schemas.GuestAdded(guest=guest, total=total)


@router.delete("/guests/{name}", response_model=schemas.GuestDeleted)
def delete_guest(
    name: str,
    credential: Optional[str] = Depends(admin_credential),
    engine: RSVPEngine = Depends(get_engine),
):
    # FastAPI ya decodifica el segmento de ruta ('Jane%20Smith' → 'Jane Smith').
    removed, total = engine.delete_guest(name, credential)
    return schemas.GuestDeleted(deletedGuest=removed, total=total)
