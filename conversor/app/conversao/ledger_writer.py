"""Gera o arquivo final de importacao contabil (CSV ';' em cp1252)."""
from __future__ import annotations

import csv
import io
import logging
import unicodedata
from collections.abc import Iterable
from typing import Any

from .exceptions import LedgerWriteError
from .models import OutputRow

logger = logging.getLogger(__name__)

HEADER = ["Operação", "Data", "Descrição Credito", "Conta Credito", "Valor", "Historico"]

_REMOVIDOS = str.maketrans("", "", "\t\n\r")


def sanitize_field(valor: Any) -> str:
    """Remove tab/quebras de linha e troca outros caracteres de controle por espaco."""
    texto = str(valor if valor is not None else "").translate(_REMOVIDOS)
    texto = "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in texto)
    return texto.strip()


def write_ledger(rows: Iterable[OutputRow], encoding: str = "cp1252") -> bytes:
    """Serializa as linhas com o cabecalho fixo. Qualquer falha aborta o arquivo inteiro."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    total = 0
    try:
        writer.writerow(HEADER)
        for row in rows:
            writer.writerow([sanitize_field(campo) for campo in row.as_record()])
            total += 1
        conteudo = buffer.getvalue().encode(encoding)
    except (UnicodeEncodeError, LookupError, csv.Error) as exc:
        raise LedgerWriteError(f"erro ao gerar CSV final: {exc}") from exc
    logger.debug(f"Arquivo final com {total} lançamentos ({len(conteudo)} bytes)")
    return conteudo


__all__ = ["HEADER", "sanitize_field", "write_ledger"]
