# app/matching.py

# =================================================================================
# 🔎 COINCIDENCIA FLEXIBLE DE NOMBRES CONTRA LA LISTA DE INVITADOS
# ---------------------------------------------------------------------------------
# Normalización canónica (única para todo el proyecto):
#   NFKD → sin acentos → minúsculas → solo [a-z0-9].
# Reglas de match (simétricas):
#   1) ambos vacíos → match; solo uno vacío → no match.
#   2) iguales → match.
#   3) uno contiene al otro → match.
#   4) distancia de Levenshtein / longitud mayor < umbral (0.3 por defecto).
# =================================================================================

import re
import unicodedata
from typing import Iterable

DEFAULT_THRESHOLD = 0.3

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(s: str) -> str:
    """Quita acentos, pasa a minúsculas y deja solo letras ASCII y dígitos."""
    txt = unicodedata.normalize("NFKD", s or "")
    txt = "".join(ch for ch in txt if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", txt.lower())


def levenshtein_distance(a: str, b: str) -> int:
    """Distancia de edición clásica (insertar/borrar/sustituir, coste 1)."""
    # Tabla (len(b)+1) x (len(a)+1): fila i ↔ prefijo de b, columna j ↔ prefijo de a.
    d = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]
    for i in range(len(b) + 1):
        d[i][0] = i
    for j in range(len(a) + 1):
        d[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                d[i][j] = d[i - 1][j - 1]
            else:
                d[i][j] = 1 + min(d[i - 1][j - 1], d[i][j - 1], d[i - 1][j])
    return d[len(b)][len(a)]


def fuzzy_match(a: str, b: str, threshold: float = DEFAULT_THRESHOLD) -> bool:
    """True si los dos nombres se consideran la misma persona."""
    s1 = normalize_name(a)
    s2 = normalize_name(b)

    if not s1 and not s2:
        return True
    # Un nombre sin letras ni dígitos no identifica a nadie (y "" está contenido en todo).
    if not s1 or not s2:
        return False

    if s1 == s2:
        return True
    if s1 in s2 or s2 in s1:
        return True

    distance = levenshtein_distance(s1, s2)
    return distance / max(len(s1), len(s2)) < threshold


def is_allowed(submitted_name: str, guest_list: Iterable[str], threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Lista vacía → registro abierto; si no, basta con coincidir con una entrada."""
    entries = list(guest_list)
    if not entries:
        return True
    return any(fuzzy_match(submitted_name, allowed, threshold) for allowed in entries)
