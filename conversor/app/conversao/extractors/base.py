"""Base comum dos extratores de lancamentos (um por layout de origem)."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TypeVar

from conversor.app.config import Settings, get_settings
from conversor.app.utils.dates import format_date

from ..account_resolver import AccountResolver
from ..amounts import format_amount
from ..models import Operation, OutputRow
from ..normalizer import normalize_text

T = TypeVar("T")

Row = Sequence[str]

# Quantas colunas iniciais sao varridas procurando rotulos
LABEL_COLUMNS = 4


@dataclass
class ExtractionState:
    """Contexto carregado entre linhas durante a leitura de um unico arquivo."""

    block_date: date | None = None
    debit_description: str = ""
    debit_code: str | None = None
    bank: str = ""
    in_narrative: bool = False


def cell(row: Row, idx: int) -> str:
    if idx < 0 or idx >= len(row):
        return ""
    valor = row[idx]
    return str(valor).strip() if valor is not None else ""


def find_label(row: Row, predicate: Callable[[str, str], bool], columns: int = LABEL_COLUMNS) -> int | None:
    """Indice da primeira celula (entre as iniciais) cujo (texto, texto normalizado) satisfaz ``predicate``."""
    for idx in range(min(columns, len(row))):
        bruto = cell(row, idx)
        if bruto and predicate(bruto, normalize_text(bruto)):
            return idx
    return None


def value_after_label(row: Row, idx: int) -> str:
    """Valor de um rotulo: o que vem depois de ':' na mesma celula ou a proxima celula preenchida."""
    bruto = cell(row, idx)
    if ":" in bruto:
        resto = bruto.split(":", 1)[1].strip()
        if resto:
            return resto
    for proxima in range(idx + 1, len(row)):
        texto = cell(row, proxima)
        if texto:
            return texto
    return ""


def lookback(
    rows: Sequence[Row],
    index: int,
    window: int,
    probe: Callable[[Row], T | None],
    stop: Callable[[Row], bool] | None = None,
) -> T | None:
    """Procura para tras, no maximo ``window`` linhas, a primeira em que ``probe`` devolve algo.

    ``stop`` marca a linha que abre o bloco atual: ela ainda e consultada,
    mas a busca nao passa dela.
    """
    inicio = index - 1
    fim = max(index - window, 0)
    for posicao in range(inicio, fim - 1, -1):
        encontrado = probe(rows[posicao])
        if encontrado is not None:
            return encontrado
        if stop is not None and stop(rows[posicao]):
            break
    return None


class BaseExtractor(ABC):
    """Percorre as linhas uma unica vez e devolve as linhas do arquivo final."""

    layout_name: str

    def __init__(
        self,
        resolver: AccountResolver,
        debit_prefixes: Iterable[str] | None = None,
        credit_prefixes: Iterable[str] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.resolver = resolver
        self.debit_prefixes = list(debit_prefixes or [])
        self.credit_prefixes = list(credit_prefixes or [])
        self.settings = settings or get_settings()
        self.dropped_rows = 0

    @abstractmethod
    def extract(self, rows: Sequence[Row]) -> list[OutputRow]:
        """Converte as linhas lidas do arquivo em linhas de lancamento."""

    @staticmethod
    def output_row(
        operation: Operation,
        data: date,
        codigo: str,
        descricao: str,
        valor: Decimal,
        historico: str,
    ) -> OutputRow:
        return OutputRow(
            operation=operation,
            date=format_date(data),
            account_code=codigo,
            counterparty_description=descricao,
            amount=format_amount(valor),
            narrative=historico,
        )


__all__ = [
    "BaseExtractor",
    "ExtractionState",
    "LABEL_COLUMNS",
    "cell",
    "find_label",
    "value_after_label",
    "lookback",
]
