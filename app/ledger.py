# app/ledger.py

# =================================================================================
# 📒 MOTOR DE ADMISIÓN Y LEDGER
# ---------------------------------------------------------------------------------
# Une la lógica pura (app/crud) con el almacenamiento (app/db.FileStore):
#   lock del archivo → leer todo → aplicar operación pura → escribir todo.
# - Un solo escritor por archivo (threading.Lock por ruta) evita que dos envíos
#   simultáneos se pisen (last-writer-wins).
# - Las operaciones de mantenimiento exigen la contraseña admin antes de tocar nada.
# =================================================================================

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from app.config import Settings
from app.core.errors import RSVPError, StorageFailure
from app.core.security import check_admin_credential
from app.crud import guests_crud, rsvps_crud
from app.db import FileStore
from app.models import RSVPRecord, ledger_from_json, ledger_to_json
from app.schemas import RSVPSubmission


def _mask_phone(phone: Optional[str]) -> str:
    """Enmascara un teléfono para no exponer PII en logs: '(555) 123-4567' -> '***4567'."""
    digits = rsvps_crud.phone_digits(phone)
    if not digits:
        return "<no-phone>"
    return "***" + digits[-4:]


class RSVPEngine:
    """Punto único de escritura del ledger y de la lista de invitados."""

    def __init__(
        self,
        settings: Settings,
        store: Optional[FileStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self.store = store or FileStore(settings.data_dir)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------------------
    # 📥 Carga / guardado (el llamador debe tener el lock correspondiente)
    # ------------------------------------------------------------------------------
    def _read_ledger(self) -> List[RSVPRecord]:
        raw = self.store.read(self.settings.ledger_file)
        if raw is None:
            return []
        try:
            return ledger_from_json(raw)
        except ValidationError as e:
            logger.error("LEDGER → {} ilegible | err={}", self.settings.ledger_file, e)
            raise StorageFailure() from e

    def _write_ledger(self, records: List[RSVPRecord]) -> None:
        self.store.write(self.settings.ledger_file, ledger_to_json(records))

    def _read_guest_list(self) -> List[str]:
        raw = self.store.read(self.settings.guests_file)
        if raw is None:
            return []
        try:
            return guests_crud.parse_guest_list(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            logger.error("GUESTS → {} no es UTF-8 | err={}", self.settings.guests_file, e)
            raise StorageFailure() from e

    def _write_guest_list(self, names: List[str]) -> None:
        self.store.write(self.settings.guests_file, guests_crud.render_guest_list(names).encode("utf-8"))

    def load_rsvps(self) -> List[RSVPRecord]:
        with self.store.lock(self.settings.ledger_file):
            return self._read_ledger()

    def load_guest_list(self) -> List[str]:
        with self.store.lock(self.settings.guests_file):
            return self._read_guest_list()

    def _authorize(self, credential: Optional[str], action: str) -> None:
        try:
            check_admin_credential(self.settings.admin_password, credential)
        except RSVPError:
            logger.warning("ADMIN/{} → credencial rechazada", action)
            raise

    # ------------------------------------------------------------------------------
    # ✅ Envío público de RSVP
    # ------------------------------------------------------------------------------
    def submit_rsvp(self, submission: RSVPSubmission, ip_address: Optional[str] = None) -> RSVPRecord:
        with self.store.lock(self.settings.ledger_file):
            ledger = self._read_ledger()
            guest_list = self.load_guest_list()
            try:
                new_ledger, record = rsvps_crud.admit(
                    ledger,
                    guest_list,
                    submission,
                    settings=self.settings,
                    ip_address=ip_address,
                    now=self._clock(),
                )
            except RSVPError as e:
                logger.info("RSVP → rechazado | reason={} | phone={}", e.code, _mask_phone(submission.phone))
                raise
            self._write_ledger(new_ledger)

        logger.info(
            "RSVP → aceptado | id={} | attending={} | guests={} | phone={}",
            record.id, record.attending, record.guests, _mask_phone(record.phone),
        )
        return record

    # ------------------------------------------------------------------------------
    # 👑 Mantenimiento (requiere contraseña admin)
    # ------------------------------------------------------------------------------
    def list_rsvps(self, credential: Optional[str]) -> Dict[str, Any]:
        self._authorize(credential, "list_rsvps")
        return rsvps_crud.summarize(self.load_rsvps())

    def delete_rsvp(self, rsvp_id: str, credential: Optional[str]) -> RSVPRecord:
        self._authorize(credential, "delete_rsvp")
        with self.store.lock(self.settings.ledger_file):
            new_ledger, removed = rsvps_crud.delete(self._read_ledger(), rsvp_id)
            self._write_ledger(new_ledger)
        logger.info("ADMIN/delete_rsvp → borrado | id={} | names={}", removed.id, removed.names)
        return removed

    def list_guests(self, credential: Optional[str]) -> List[str]:
        self._authorize(credential, "list_guests")
        return self.load_guest_list()

    def add_guest(self, name: Optional[str], credential: Optional[str]) -> Tuple[str, int]:
        """Devuelve (nombre guardado, total de invitados tras el alta)."""
        self._authorize(credential, "add_guest")
        with self.store.lock(self.settings.guests_file):
            names, added = guests_crud.add(self._read_guest_list(), name, self.settings.max_field_length)
            self._write_guest_list(names)
        logger.info("ADMIN/add_guest → añadido | guest={} | total={}", added, len(names))
        return added, len(names)

    def delete_guest(self, name: Optional[str], credential: Optional[str]) -> Tuple[str, int]:
        """Devuelve (nombre eliminado tal como estaba guardado, total restante)."""
        self._authorize(credential, "delete_guest")
        with self.store.lock(self.settings.guests_file):
            names, removed = guests_crud.remove(self._read_guest_list(), name, self.settings.max_field_length)
            self._write_guest_list(names)
        logger.info("ADMIN/delete_guest → eliminado | guest={} | total={}", removed, len(names))
        return removed, len(names)
