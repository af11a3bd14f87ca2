# app/db.py
# =================================================================================
# 🗄️ ALMACENAMIENTO EN ARCHIVOS PLANOS
# ---------------------------------------------------------------------------------
# El ledger (rsvps.json) y la lista de invitados (guests.txt) viven en disco.
# - read(): devuelve bytes, o None si el archivo no existe (colección vacía).
# - write(): escribe a un temporal en el mismo directorio, fsync y os.replace,
#   de modo que un fallo a mitad de escritura deja intacto el archivo anterior.
# - lock(): un threading.Lock por ruta; quien muta un archivo lo retiene durante
#   todo el ciclo leer → modificar → escribir (un solo escritor por archivo).
# =================================================================================

import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional

from fastapi import Request
from loguru import logger

from app.core.errors import StorageFailure


class FileStore:
    """Almacén clave→bytes sobre un directorio local."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.root / name

    def lock(self, name: str) -> threading.Lock:
        """Devuelve (creándolo si hace falta) el lock de escritura del archivo `name`."""
        with self._locks_guard:
            lk = self._locks.get(name)
            if lk is None:
                lk = threading.Lock()
                self._locks[name] = lk
            return lk

    def read(self, name: str) -> Optional[bytes]:
        path = self.path_for(name)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("STORE/read → fallo | path={} | err={}", path, e)
            raise StorageFailure() from e

    def write(self, name: str, data: bytes) -> None:
        path = self.path_for(name)
        tmp_name = None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=self.root)
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            logger.error("STORE/write → fallo | path={} | err={}", path, e)
            raise StorageFailure() from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("STORE/write → no se pudo borrar temporal | tmp={}", tmp_name)

    def ensure_root(self) -> None:
        """Crea el directorio de datos si no existe (se llama en el arranque)."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailure() from e


# =================================================================================
# 🔎 UTILIDAD: LOGUEAR LA RUTA REAL DE LOS DATOS EN STARTUP
# =================================================================================
def log_data_paths_on_startup(store: FileStore, *names: str) -> None:
    """Escribe en los logs dónde están los archivos de datos y si ya existen."""
    logger.info("DATA dir → {} (abs={})", store.root, store.root.resolve())
    for name in names:
        path = store.path_for(name)
        logger.info("DATA file → {} | exists={}", path, path.exists())


def get_engine(request: Request):
    """Dependencia de FastAPI: devuelve el motor RSVP montado en app.state."""
    return request.app.state.engine
