# app/core/security.py
import secrets
from typing import Optional

from fastapi import Depends, Query
from fastapi.security.api_key import APIKeyHeader

from app.core.errors import Unauthorized

_api_key_header = APIKeyHeader(name="x-admin-key", auto_error=False)


def check_admin_credential(configured: str, supplied: Optional[str]) -> None:
    """Igualdad exacta contra la contraseña configurada; sin contraseña configurada nadie entra."""
    if not configured or supplied is None:
        raise Unauthorized("Unauthorized - Invalid password")
    if not secrets.compare_digest(configured.encode("utf-8"), supplied.encode("utf-8")):
        raise Unauthorized("Unauthorized - Invalid password")


def admin_credential(
    password: Optional[str] = Query(default=None),
    api_key: Optional[str] = Depends(_api_key_header),
) -> Optional[str]:
    """Extrae la credencial de `?password=` o de la cabecera `x-admin-key` (query tiene prioridad)."""
    return password if password is not None else api_key
