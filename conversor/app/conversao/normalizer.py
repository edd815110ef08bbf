"""Normalizacao de texto usada como chave de todas as buscas no plano de contas."""
from __future__ import annotations

import re
import unicodedata
from typing import Any

from rapidfuzz import fuzz

_NAO_ALFANUMERICO_RE = re.compile(r"[^A-Z0-9 ]+")
_ESPACOS_RE = re.compile(r"\s+")


def normalize_text(valor: Any) -> str:
    """Remove acentos, coloca em caixa alta e troca pontuacao por espaco.

    ``normalize_text("Café  Ltda.") == "CAFE LTDA"``. Idempotente.
    """
    if valor is None:
        return ""
    texto = unicodedata.normalize("NFD", str(valor))
    texto = "".join(ch for ch in texto if unicodedata.category(ch) != "Mn")
    texto = texto.upper()
    texto = _NAO_ALFANUMERICO_RE.sub(" ", texto)
    texto = _ESPACOS_RE.sub(" ", texto)
    return texto.strip()


def clean_text(valor: Any) -> str:
    """Texto original sem espacos nas pontas; ``None`` vira vazio."""
    return str(valor or "").strip()


def similarity(a: str, b: str) -> float:
    """Auxiliar usado no desempate da busca aproximada."""
    return float(fuzz.token_sort_ratio(a or "", b or ""))


__all__ = ["normalize_text", "clean_text", "similarity"]
