# app/crud/rsvps_crud.py

# =================================================================================
# 🧩 Lógica pura del ledger de RSVPs (sin E/S)
# - admit(): valida, sanea, comprueba lista de invitados y duplicados, crea el registro.
# - delete(): elimina por id.
# - summarize(): vista de resumen para el panel admin.
# Todas reciben el estado actual y devuelven (nuevo_estado, resultado); el reloj y
# la fábrica de ids se inyectan para que los tests sean deterministas.
# =================================================================================

from datetime import datetime, timezone
import re
import secrets
import string
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from app.config import Settings
from app.core.errors import (
    DuplicateSubmission,
    InvalidGuestCount,
    InvalidPhone,
    MissingFields,
    NotFound,
    NotOnGuestList,
)
from app.matching import is_allowed
from app.models import AttendingEnum, RSVPRecord
from app.schemas import RSVPSubmission

_UNSAFE_CHARS = re.compile(r"[<>\"']")
_ID_ALPHABET = string.ascii_lowercase + string.digits

IdFactory = Callable[[datetime, Callable[[str], bool]], str]


# ---------------------------------------------------------------------------------
# 🧼 Saneamiento y validaciones de campo
# ---------------------------------------------------------------------------------

def sanitize_input(value: Optional[str], max_length: int = 500) -> Optional[str]:
    """Quita < > " ', recorta espacios y trunca a `max_length`. None se mantiene None."""
    if value is None:
        return None
    return _UNSAFE_CHARS.sub("", str(value)).strip()[:max_length]


def phone_digits(phone: Optional[str]) -> str:
    return re.sub(r"\D", "", phone or "")


def is_valid_phone(phone: Optional[str]) -> bool:
    """Acepta teléfonos de 10 u 11 dígitos (formato US), ignorando separadores."""
    return 10 <= len(phone_digits(phone)) <= 11


def parse_guest_count(value: Any, min_guests: int = 1, max_guests: int = 8) -> int:
    """Devuelve el número de personas o lanza InvalidGuestCount."""
    # bool es subclase de int: True no es "1 persona".
    if value is None or isinstance(value, bool):
        raise InvalidGuestCount()
    if isinstance(value, float) and value.is_integer():
        count = int(value)
    elif isinstance(value, int):
        count = value
    elif isinstance(value, str) and value.strip().isdecimal():
        count = int(value.strip())
    else:
        raise InvalidGuestCount()
    if not (min_guests <= count <= max_guests):
        raise InvalidGuestCount()
    return count


def _is_blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


# ---------------------------------------------------------------------------------
# 🆔 Generador de ids
# ---------------------------------------------------------------------------------

def generate_rsvp_id(now: datetime, is_unique: Callable[[str], bool]) -> str:
    """Id tipo '1760791234567k3f9x0a2b': milisegundos + sufijo aleatorio; reintenta si colisiona."""
    millis = int(now.timestamp() * 1000)
    while True:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
        candidate = f"{millis}{suffix}"
        if is_unique(candidate):
            return candidate


def find_duplicate(ledger: Sequence[RSVPRecord], names: str, phone: str) -> Optional[RSVPRecord]:
    """Primer registro con el mismo nombre (casefold) y el mismo teléfono exacto."""
    key = names.casefold()
    for rsvp in ledger:
        if rsvp.names.casefold() == key and rsvp.phone == phone:
            return rsvp
    return None


# ---------------------------------------------------------------------------------
# ✅ Admisión
# ---------------------------------------------------------------------------------

def admit(
    ledger: Sequence[RSVPRecord],
    guest_list: Sequence[str],
    submission: RSVPSubmission,
    *,
    settings: Settings,
    ip_address: Optional[str] = None,
    now: Optional[datetime] = None,
    id_factory: IdFactory = generate_rsvp_id,
) -> Tuple[List[RSVPRecord], RSVPRecord]:
    """
    Decide si el RSVP entra en el ledger. El primer fallo corta el resto:
    campos obligatorios → nº de personas → saneamiento → teléfono →
    lista de invitados → duplicado. Nunca modifica `ledger`; devuelve una lista nueva.
    """
    if _is_blank(submission.names) or _is_blank(submission.phone) or _is_blank(submission.attending):
        raise MissingFields()

    attending = AttendingEnum.yes if submission.attending.strip().lower() == "yes" else AttendingEnum.no

    guests: Optional[int] = None
    if attending == AttendingEnum.yes:
        guests = parse_guest_count(submission.guests, settings.min_guests, settings.max_guests)

    limit = settings.max_field_length
    names = sanitize_input(submission.names, limit)
    phone = sanitize_input(submission.phone, limit)
    if not names or not phone:
        raise MissingFields()
    dietary = sanitize_input(submission.dietary, limit) or None
    message = sanitize_input(submission.message, limit) or None

    if not is_valid_phone(phone):
        raise InvalidPhone()

    if not is_allowed(names, guest_list, settings.match_threshold):
        raise NotOnGuestList()

    if find_duplicate(ledger, names, phone) is not None:
        raise DuplicateSubmission()

    now = now or datetime.now(timezone.utc)
    taken = {r.id for r in ledger}
    record = RSVPRecord(
        id=id_factory(now, lambda candidate: candidate not in taken),
        names=names,
        phone=phone,
        attending=attending,
        guests=guests,
        dietary=dietary,
        message=message,
        timestamp=now,
        ip_address=(ip_address or "unknown"),
    )
    return [*ledger, record], record


# ---------------------------------------------------------------------------------
# 🗑️ Borrado y resumen
# ---------------------------------------------------------------------------------

def delete(ledger: Sequence[RSVPRecord], rsvp_id: str) -> Tuple[List[RSVPRecord], RSVPRecord]:
    """Quita el primer registro con ese id; NotFound si no existe."""
    for idx, rsvp in enumerate(ledger):
        if rsvp.id == rsvp_id:
            return [*ledger[:idx], *ledger[idx + 1:]], rsvp
    raise NotFound("RSVP not found")


def summarize(ledger: Sequence[RSVPRecord]) -> Dict[str, Any]:
    attending = [r for r in ledger if r.attending == AttendingEnum.yes]
    return {
        "total": len(ledger),
        "attending": len(attending),
        "notAttending": len(ledger) - len(attending),
        "totalGuests": sum(r.guests or 0 for r in attending),
        "rsvps": [r.to_json_dict() for r in ledger],
    }
