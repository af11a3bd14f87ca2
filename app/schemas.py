# app/schemas.py

# =================================================================================
# 📦 Schemas (MODELOS DE DATOS Pydantic) de la API
# ---------------------------------------------------------------------------------
# - Entrada: se acepta el payload tal cual llega del formulario; las reglas de
#   negocio (obligatorios, nº de personas, teléfono) las aplica el motor para
#   respetar el orden de validación y devolver el error tipado correcto.
# - Salida: respuestas JSON con las mismas claves que consume el panel admin.
# =================================================================================

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =================================================================================
# 📋 Envío de RSVP desde el formulario público
# =================================================================================
class RSVPSubmission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    names: Optional[str] = None
    phone: Optional[str] = None
    attending: Optional[str] = None
    guests: Any = None                     # int, "3" o 3.0; el motor decide si es válido.
    dietary: Optional[str] = None
    message: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_dietary_alias(cls, data):
        # El panel antiguo enviaba 'dietaryRestrictions'; se acepta como alias.
        if isinstance(data, dict):
            if "dietaryRestrictions" in data and "dietary" not in data:
                data = {**data, "dietary": data["dietaryRestrictions"]}
        return data


class RSVPCreated(BaseModel):
    message: str
    id: str


# =================================================================================
# 👑 Panel admin: RSVPs
# =================================================================================
class RSVPSummary(BaseModel):
    total: int
    attending: int
    notAttending: int
    totalGuests: int
    rsvps: List[Dict[str, Any]] = Field(default_factory=list)


class DeletedRSVP(BaseModel):
    id: str
    names: str


class RSVPDeleted(BaseModel):
    success: bool = True
    message: str = "RSVP deleted successfully"
    deletedRsvp: DeletedRSVP


# =================================================================================
# 👥 Panel admin: lista de invitados
# =================================================================================
class GuestNamePayload(BaseModel):
    name: Optional[str] = None


class GuestListResponse(BaseModel):
    success: bool = True
    guests: List[str] = Field(default_factory=list)
    total: int


class GuestAdded(BaseModel):
    success: bool = True
    message: str = "Guest added successfully"
    guest: str
    total: int


class GuestDeleted(BaseModel):
    success: bool = True
    message: str = "Guest deleted successfully"
    deletedGuest: str
    total: int


# =================================================================================
# 🩺 Errores y salud
# =================================================================================
class ErrorResponse(BaseModel):
    error: str
    code: str


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Metadatos OpenAPI: cada código de error documentado con el cuerpo {error, code}."""
    return {code: {"model": ErrorResponse} for code in status_codes}


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
    uptime: float
