# scripts/import_guests.py
# =============================================================================
# 🚚 Importador masivo de invitados hacia el backend (endpoint admin).
# - Lee un archivo (xlsx/csv) con pandas y toma la columna de nombres
#   (`full_name` o `name`).
# - Descarta vacíos y duplicados (sin distinguir mayúsculas) antes de enviar.
# - Envía cada nombre a:  POST /api/admin/guests
#   Un "Guest already exists" cuenta como omitido, no como error.
# - Requiere ADMIN_PASSWORD (cabecera: x-admin-key).
# =============================================================================

import argparse
import json
import os
import sys
from typing import List, Optional

import pandas as pd
import requests
from dotenv import load_dotenv

# --- Carga .env temprano ---
load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

ENDPOINT = f"{API_BASE_URL.rstrip('/')}/api/admin/guests"
NAME_COLUMNS = ("full_name", "name", "names", "guest")


def _read_table(file_path: str, *, sheet_name: Optional[str] = None, csv_sep: str = ",",
                csv_encoding: str = "utf-8") -> pd.DataFrame:
    """Lee .xlsx/.xls o .csv con dtype=str y fillna('')."""
    if file_path.lower().endswith((".xlsx", ".xls")):
        return pd.read_excel(file_path, dtype=str, sheet_name=sheet_name or 0).fillna("")
    return pd.read_csv(file_path, dtype=str, sep=csv_sep, encoding=csv_encoding).fillna("")


def extract_guest_names(df: pd.DataFrame) -> List[str]:
    """Devuelve los nombres de la primera columna reconocida, sin vacíos ni duplicados (casefold)."""
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower()
    column = next((c for c in NAME_COLUMNS if c in df.columns), None)
    if column is None:
        raise ValueError(f"Falta columna de nombres (una de: {', '.join(NAME_COLUMNS)})")

    seen = set()
    names: List[str] = []
    for raw in df[column]:
        name = " ".join(str(raw).split())
        if not name or name.startswith("#"):
            continue
        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)
        names.append(name)
    return names


def _post_guest(name: str, timeout: int = 15) -> str:
    """Envía un invitado; devuelve 'created' o 'skipped' (ya existía). Lanza RuntimeError si falla."""
    headers = {"Content-Type": "application/json", "x-admin-key": ADMIN_PASSWORD}
    resp = requests.post(ENDPOINT, headers=headers, data=json.dumps({"name": name}), timeout=timeout)
    if resp.status_code == 200:
        return "created"
    try:
        detail = resp.json()
    except ValueError:
        detail = {"error": resp.text}
    if resp.status_code == 400 and detail.get("code") == "AlreadyExists":
        return "skipped"
    raise RuntimeError(f"HTTP {resp.status_code} - {detail}")


def main():
    parser = argparse.ArgumentParser(description="Importador masivo de invitados (guests.txt vía API admin).")
    parser.add_argument("file", help="Ruta al archivo .xlsx/.xls o .csv")
    parser.add_argument("--sheet", default=None, help="Nombre de hoja en Excel (opcional)")
    parser.add_argument("--sep", default=",", help="Separador para CSV (por defecto ',')")
    parser.add_argument("--encoding", default="utf-8", help="Encoding para CSV (por defecto utf-8)")
    parser.add_argument("--dry-run", action="store_true", help="Solo valida y muestra vista previa; no importa")
    args = parser.parse_args()

    print(f"📥 Cargando archivo: {args.file}")
    try:
        df = _read_table(args.file, sheet_name=args.sheet, csv_sep=args.sep, csv_encoding=args.encoding)
        names = extract_guest_names(df)
    except (OSError, ValueError) as e:
        print(f"❌ Error al leer/validar: {e}")
        sys.exit(1)

    if not names:
        print("⛔ No hay nombres para importar.")
        sys.exit(1)

    print(f"📦 Invitados preparados para importar: {len(names)}")

    if args.dry_run:
        print("🧪 DRY-RUN activo: no se enviará nada al backend.")
        print(json.dumps(names[:10], indent=2, ensure_ascii=False))
        sys.exit(0)

    if not ADMIN_PASSWORD:
        print("❌ Falta ADMIN_PASSWORD en el entorno.")
        sys.exit(1)

    created = skipped = 0
    errors: List[str] = []
    print(f"➡️  Importando hacia {ENDPOINT}")
    for idx, name in enumerate(names, start=1):
        try:
            outcome = _post_guest(name)
        except (requests.RequestException, RuntimeError) as e:
            errors.append(f"Fila {idx} ({name}): {e}")
            continue
        if outcome == "created":
            created += 1
        else:
            skipped += 1

    print("\n✅ Resumen de importación:")
    print(json.dumps({"created": created, "skipped": skipped, "errors": errors}, indent=2, ensure_ascii=False))
    if errors:
        sys.exit(2)


if __name__ == "__main__":
    main()
