from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any

_FORMATOS = ("%d/%m/%Y", "%d/%m/%y", "%d-%m-%Y", "%d.%m.%Y", "%Y-%m-%d", "%Y-%m-%d %H:%M:%S")
_DATA_RE = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2})\b")


def parse_date(valor: Any) -> date | None:
    """Aceita date/datetime, textos dd/mm/aaaa ou aaaa-mm-dd e seriais do Excel."""
    if valor in (None, ""):
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    if isinstance(valor, (int, float)) and not isinstance(valor, bool):
        if valor != valor or not 1 <= valor < 2958466:
            return None
        base = datetime(1899, 12, 30)
        return (base + timedelta(days=int(valor))).date()
    texto = str(valor).strip()
    for fmt in _FORMATOS:
        try:
            return datetime.strptime(texto, fmt).date()
        except ValueError:
            continue
    return None


def find_date(texto: Any) -> date | None:
    """Procura a primeira data dentro de um texto livre ("Data: 05/01/2026")."""
    if texto in (None, ""):
        return None
    direto = parse_date(texto)
    if direto is not None:
        return direto
    for match in _DATA_RE.finditer(str(texto)):
        encontrada = parse_date(match.group(1))
        if encontrada is not None:
            return encontrada
    return None


def format_date(valor: date) -> str:
    return valor.strftime("%d/%m/%Y")


__all__ = ["parse_date", "find_date", "format_date"]
