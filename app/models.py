# app/models.py

# =================================================================================
# 🏛️ MODELOS DE DOMINIO PERSISTIDOS
# ---------------------------------------------------------------------------------
# Estructura de los registros que viven en el ledger (rsvps.json).
# - Las claves en disco son las que consume el panel admin (`ipAddress` en camelCase).
# - Los campos opcionales ausentes no se escriben (exclude_none al serializar).
# - Un RSVPRecord nunca se modifica tras crearse: solo se borra.
# =================================================================================

from datetime import datetime
import json
import enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# 🗂️ ENUMS PARA CONSISTENCIA DE DATOS
# ---------------------------------------------------------------------------------
class AttendingEnum(str, enum.Enum):
    yes = "yes"
    no = "no"


# 📝 REGISTRO RSVP (una entrada del ledger)
# ---------------------------------------------------------------------------------
class RSVPRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    id: str
    names: str
    phone: str
    attending: AttendingEnum
    guests: Optional[int] = None          # Solo presente si attending == "yes".
    dietary: Optional[str] = None
    message: Optional[str] = None
    timestamp: datetime
    ip_address: str = Field(default="unknown", alias="ipAddress")

    def to_json_dict(self) -> Dict[str, Any]:
        """Dict listo para JSON con las claves tal como se guardan en disco."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


_LEDGER_ADAPTER = TypeAdapter(List[RSVPRecord])


def ledger_from_json(raw: bytes) -> List[RSVPRecord]:
    """Parsea el contenido de rsvps.json (lista JSON) a registros tipados."""
    if not raw.strip():
        return []
    return _LEDGER_ADAPTER.validate_json(raw)


def ledger_to_json(records: List[RSVPRecord]) -> bytes:
    """Serializa el ledger completo con indentación legible (diffable)."""
    payload = [r.to_json_dict() for r in records]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
