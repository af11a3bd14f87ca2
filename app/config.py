# app/config.py

# =================================================================================
# ⚙️ CONFIGURACIÓN DEL SERVICIO RSVP
# ---------------------------------------------------------------------------------
# Centraliza los parámetros del motor de admisión y del almacenamiento en disco.
# - Se construye una sola vez desde variables de entorno (.env vía python-dotenv).
# - Se inyecta explícitamente en el motor; no hay estado global mutable.
# =================================================================================

import os
from pathlib import Path
from typing import List

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator


def _int_from_env(name: str, default: int, minimum: int) -> int:
    """Lee un entero >= `minimum` desde env; si no es válido o está fuera de rango, avisa y usa el default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("CONFIG → {} inválido ({!r}); usando {}", name, raw, default)
        return default
    if value < minimum:
        logger.warning("CONFIG → {} fuera de rango ({} < {}); usando {}", name, value, minimum, default)
        return default
    return value


def _float_from_env(name: str, default: float, low: float, high: float) -> float:
    """Lee un float en el intervalo (low, high]; fuera de rango → default con aviso."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("CONFIG → {} inválido ({!r}); usando {}", name, raw, default)
        return default
    if not (low < value <= high):
        logger.warning("CONFIG → {} fuera de rango ({} ∉ ({}, {}]); usando {}", name, value, low, high, default)
        return default
    return value


def _list_from_env(name: str, default: List[str]) -> List[str]:
    """Convierte 'a, b ,c' en ['a', 'b', 'c']; vacío → default."""
    raw = os.getenv(name, "")
    items = [x.strip() for x in raw.split(",") if x.strip()]
    return items or list(default)


DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


class Settings(BaseModel):
    """Parámetros del servicio. Inmutable una vez creado."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Path("data")
    ledger_file: str = "rsvps.json"
    guests_file: str = "guests.txt"

    # Sin valor por defecto: si no hay contraseña configurada, el panel admin queda cerrado.
    admin_password: str = ""

    min_guests: int = Field(default=1, ge=0)
    max_guests: int = Field(default=8, ge=1)
    match_threshold: float = Field(default=0.3, gt=0, le=1)
    max_field_length: int = Field(default=500, ge=1)

    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @model_validator(mode="after")
    def _check_guest_range(self) -> "Settings":
        if self.min_guests > self.max_guests:
            raise ValueError(f"min_guests ({self.min_guests}) > max_guests ({self.max_guests})")
        return self

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / self.ledger_file

    @property
    def guests_path(self) -> Path:
        return self.data_dir / self.guests_file

    @classmethod
    def from_env(cls) -> "Settings":
        """Construye la configuración a partir de las variables de entorno actuales.

        Valores numéricos inválidos o fuera de rango no tumban el arranque: se avisa
        por log y se usa el valor por defecto.
        """
        min_guests = _int_from_env("RSVP_MIN_GUESTS", 1, minimum=0)
        max_guests = _int_from_env("RSVP_MAX_GUESTS", 8, minimum=1)
        if min_guests > max_guests:
            logger.warning(
                "CONFIG → RSVP_MIN_GUESTS ({}) > RSVP_MAX_GUESTS ({}); usando 1..8", min_guests, max_guests
            )
            min_guests, max_guests = 1, 8

        return cls(
            data_dir=Path(os.getenv("RSVP_DATA_DIR", "data").strip() or "data"),
            ledger_file=os.getenv("RSVP_LEDGER_FILE", "rsvps.json").strip() or "rsvps.json",
            guests_file=os.getenv("RSVP_GUESTS_FILE", "guests.txt").strip() or "guests.txt",
            admin_password=os.getenv("ADMIN_PASSWORD", ""),
            min_guests=min_guests,
            max_guests=max_guests,
            match_threshold=_float_from_env("RSVP_MATCH_THRESHOLD", 0.3, low=0.0, high=1.0),
            max_field_length=_int_from_env("RSVP_MAX_FIELD_LENGTH", 500, minimum=1),
            cors_origins=_list_from_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )
