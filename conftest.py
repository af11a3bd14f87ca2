# conftest.py
# -------------------------------------------------------------------------------------
# Archivo: conftest.py (raíz del proyecto)
# Propósito: Fixtures compartidas para la suite del motor RSVP y de la API.
#            - Cada test trabaja sobre un directorio de datos temporal (tmp_path).
#            - El reloj del motor es fijo para que timestamps e ids sean predecibles.
#            - `client` monta la app FastAPI real con esa configuración.
# -------------------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.crud.guests_crud import render_guest_list
from app.db import FileStore
from app.ledger import RSVPEngine
from app.main import create_app

ADMIN_PASSWORD = "s3cret-admin"
FIXED_NOW = datetime(2026, 6, 20, 18, 30, tzinfo=timezone.utc)


def pytest_collection_finish(session):
    """Hook cuando pytest termina de recolectar tests: muestra cuántos encontró."""
    tr = session.config.pluginmanager.get_plugin("terminalreporter")
    msg = f"📋 Descubiertos {len(session.items)} tests."
    if tr:
        tr.write_line(msg)
    else:
        print(msg)


# ===============================
# Fixtures de utilidad
# ===============================
@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", admin_password=ADMIN_PASSWORD)


@pytest.fixture()
def store(settings: Settings) -> FileStore:
    return FileStore(settings.data_dir)


@pytest.fixture()
def engine(settings: Settings, store: FileStore) -> RSVPEngine:
    return RSVPEngine(settings, store=store, clock=lambda: FIXED_NOW)


@pytest.fixture()
def write_guests(settings: Settings, store: FileStore):
    """Escribe guests.txt directamente en disco (como lo editaría un humano)."""
    def _write(names: Iterable[str]) -> None:
        store.write(settings.guests_file, render_guest_list(list(names)).encode("utf-8"))
    return _write


@pytest.fixture()
def client(settings: Settings, store: FileStore):
    with TestClient(create_app(settings, store=store)) as c:
        yield c


@pytest.fixture()
def admin_password() -> str:
    return ADMIN_PASSWORD
