# app/main.py                                                                                   # Ruta y nombre del archivo principal de la API.

# =================================================================================
# 🧠 NÚCLEO DE LA APLICACIÓN API (FastAPI)
# ---------------------------------------------------------------------------------
# - Crea la instancia de FastAPI con su configuración y motor RSVP inyectados
# - Configura CORS
# - Traduce los errores del motor (RSVPError) y los de validación a respuestas JSON {error, code}
# - Registra routers modulares (rsvp, admin, meta)
# =================================================================================

import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app import meta
from app.config import Settings
from app.core.errors import MissingFields, RSVPError, StorageFailure
from app.db import FileStore, log_data_paths_on_startup
from app.ledger import RSVPEngine
from app.routers import admin, rsvp


def create_app(settings: Optional[Settings] = None, store: Optional[FileStore] = None) -> FastAPI:
    """Fábrica de la app: sin argumentos lee la configuración del entorno (.env)."""
    if settings is None:
        load_dotenv(dotenv_path=Path(".") / ".env")
        settings = Settings.from_env()

    engine = RSVPEngine(settings, store=store)

    logger.info(
        "[BOOT] DATA_DIR={} | LEDGER={} | GUESTS={} | ADMIN_PASSWORD_SET={}",
        settings.data_dir,
        settings.ledger_file,
        settings.guests_file,
        "yes" if settings.admin_password else "no",
    )

    app = FastAPI(
        title="Wedding RSVP API",
        description="Backend para recibir RSVPs filtrados por lista de invitados y gestionarlos desde el panel admin",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.started_monotonic = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(RSVPError)
    async def _rsvp_error_handler(request: Request, exc: RSVPError) -> JSONResponse:
        if isinstance(exc, StorageFailure):
            logger.opt(exception=exc).error("API → fallo de almacenamiento | path={}", request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Tipos incorrectos en el cuerpo (p. ej. names=123) → mismo formato {error, code} que el motor.
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or "body"
        message = f"Invalid request: {field} - {first.get('msg', 'invalid value')}"
        logger.warning("API → payload inválido | path={} | {}", request.url.path, message)
        return JSONResponse(
            status_code=400,
            content={"error": message, "code": MissingFields.__name__},
        )

    @app.on_event("startup")
    def _startup_data_trace() -> None:
        engine.store.ensure_root()
        log_data_paths_on_startup(engine.store, settings.ledger_file, settings.guests_file)

    app.include_router(rsvp.router)
    app.include_router(admin.router)
    app.include_router(meta.router)
    return app


app = create_app()
