# app/crud/guests_crud.py

# =================================================================================
# 🧩 Lógica pura de la lista de invitados (guests.txt)
# - parse_guest_list / render_guest_list: formato de texto en disco.
# - add(): alta con unicidad case-insensitive.
# - remove(): baja case-insensitive (nombre literal o saneado); devuelve el nombre tal como estaba guardado.
# =================================================================================

from typing import List, Optional, Sequence, Tuple

from app.core.errors import AlreadyExists, MissingFields, NotFound
from app.crud.rsvps_crud import sanitize_input

GUEST_LIST_HEADER = (
    "# Guest List for Wedding Website\n"
    "# One name per line - case insensitive fuzzy matching is used\n"
    "# If this file doesn't exist, anyone can RSVP\n"
    "\n"
)


def parse_guest_list(text: str) -> List[str]:
    """Una entrada por línea; ignora líneas vacías y comentarios (#)."""
    names = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


def render_guest_list(names: Sequence[str]) -> str:
    return GUEST_LIST_HEADER + "\n".join(names)


def _index_of(names: Sequence[str], name: str) -> Optional[int]:
    key = name.casefold()
    for idx, existing in enumerate(names):
        if existing.casefold() == key:
            return idx
    return None


def add(names: Sequence[str], name: Optional[str], max_length: int = 500) -> Tuple[List[str], str]:
    """Añade `name` saneado al final de la lista; AlreadyExists si ya estaba (sin distinguir mayúsculas)."""
    # Colapsa espacios y saltos de línea: cada invitado ocupa exactamente una línea.
    clean = sanitize_input(" ".join((name or "").split()), max_length)
    if not clean:
        raise MissingFields("Guest name is required")
    # Un '#' inicial convertiría la línea en comentario al releer el archivo.
    if clean.startswith("#"):
        raise MissingFields("Guest name cannot start with '#'")
    if _index_of(names, clean) is not None:
        raise AlreadyExists()
    return [*names, clean], clean


def remove(names: Sequence[str], name: Optional[str], max_length: int = 500) -> Tuple[List[str], str]:
    """Quita la primera entrada que coincide sin distinguir mayúsculas; NotFound si no hay.

    Acepta el nombre tal como se tecleó al darlo de alta: se prueba primero literal
    (para entradas editadas a mano en guests.txt) y luego saneado como en add().
    """
    raw = " ".join((name or "").split())
    clean = sanitize_input(raw, max_length)
    if not clean:
        raise MissingFields("Guest name is required")
    for wanted in (raw, clean):
        idx = _index_of(names, wanted)
        if idx is not None:
            return [*names[:idx], *names[idx + 1:]], names[idx]
    raise NotFound("Guest not found")
