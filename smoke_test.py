# smoke_test.py  # Script de verificación rápida (smoke test) end-to-end del backend en marcha.

# Uso:
#   ADMIN_PASSWORD=... uvicorn app.main:app --port 8000
#   ADMIN_PASSWORD=... python smoke_test.py
# Crea un invitado y un RSVP de prueba con datos únicos y los borra al terminar.

import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

# -------------------------------
# ⚙️ Configuración (por entorno)
# -------------------------------
BASE_URL = os.getenv("SMOKE_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
ADMIN_PASSWORD = os.getenv("SMOKE_ADMIN_PASSWORD", os.getenv("ADMIN_PASSWORD", ""))

# -------------------------------
# 📦 Datos de prueba dinámicos
# -------------------------------
NOW = int(time.time())
TEST_GUEST_NAME = f"Smoke Tester {NOW}"
TEST_PHONE = f"555{NOW % 10_000_000:07d}"

JSON_HEADERS = {"Content-Type": "application/json"}
ADMIN_PARAMS = {"password": ADMIN_PASSWORD}


# -------------------------------
# 🧰 Utilidades de apoyo
# -------------------------------
def get(path: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
    return requests.get(f"{BASE_URL}{path}", params=params, timeout=10)


def post(path: str, payload: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> requests.Response:
    return requests.post(f"{BASE_URL}{path}", json=payload, params=params, headers=JSON_HEADERS, timeout=15)


def delete(path: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
    return requests.delete(f"{BASE_URL}{path}", params=params, timeout=10)


def pretty(ok: bool) -> str:
    return "✅" if ok else "❌"


# -------------------------------
# Pasos
# -------------------------------
def check_health() -> bool:
    r = get("/api/health")
    return r.status_code == 200 and r.json().get("status") == "ok"


def check_admin_rejects_bad_password() -> bool:
    r = get("/api/admin", params={"password": f"wrong-{NOW}"})
    return r.status_code == 401


def check_add_guest() -> bool:
    r = post("/api/admin/guests", {"name": TEST_GUEST_NAME}, params=ADMIN_PARAMS)
    return r.status_code == 200 and r.json().get("guest") == TEST_GUEST_NAME


def check_submit_rsvp() -> Optional[str]:
    payload = {
        "names": TEST_GUEST_NAME,
        "phone": TEST_PHONE,
        "attending": "yes",
        "guests": 2,
        "message": "smoke test",
    }
    r = post("/api/rsvp", payload)
    if r.status_code != 201:
        print(f"   ↳ HTTP {r.status_code}: {r.text}")
        return None
    return r.json().get("id")


def check_duplicate_rejected() -> bool:
    payload = {"names": TEST_GUEST_NAME.upper(), "phone": TEST_PHONE, "attending": "yes", "guests": 2}
    return post("/api/rsvp", payload).status_code == 409


def cleanup(rsvp_id: Optional[str]) -> bool:
    ok = True
    if rsvp_id:
        ok = delete(f"/api/admin/rsvp/{rsvp_id}", params=ADMIN_PARAMS).status_code == 200
    r = delete(f"/api/admin/guests/{quote(TEST_GUEST_NAME)}", params=ADMIN_PARAMS)
    return ok and r.status_code == 200


def main() -> int:
    if not ADMIN_PASSWORD:
        print("❌ Define ADMIN_PASSWORD (o SMOKE_ADMIN_PASSWORD) para ejecutar el smoke test.")
        return 1

    print(f"🔥 Smoke test contra {BASE_URL}")
    results = []

    ok = check_health()
    print(f"{pretty(ok)} Health check")
    results.append(ok)

    ok = check_admin_rejects_bad_password()
    print(f"{pretty(ok)} Admin rechaza contraseña incorrecta")
    results.append(ok)

    ok = check_add_guest()
    print(f"{pretty(ok)} Alta de invitado de prueba")
    results.append(ok)

    rsvp_id = check_submit_rsvp()
    print(f"{pretty(rsvp_id is not None)} Envío de RSVP (id={rsvp_id})")
    results.append(rsvp_id is not None)

    ok = check_duplicate_rejected()
    print(f"{pretty(ok)} Duplicado rechazado (409)")
    results.append(ok)

    ok = cleanup(rsvp_id)
    print(f"{pretty(ok)} Limpieza de datos de prueba")
    results.append(ok)

    print("🟢 Todo OK" if all(results) else "🔴 Hubo fallos")
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
