"""
Relatorio de recebimentos: blocos "DATA:" / "PAGADOR" seguidos de linhas
"<numero> - <descricao>" com os valores do titulo.

Colunas de valores (a partir de 0): 4 principal, 5 juros, 6 desconto,
7 tarifa bancaria, 8 custas de cartorio, 9 valor pago. Quando a descricao nao
esta na coluna 0 e ja vem seguida de um valor, ou quando as colunas 4 a 9
estao todas vazias, os seis valores sao lidos logo depois da descricao
(distancia 1 a 6). Uma linha nunca mistura as duas disposicoes.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from conversor.app.utils.dates import find_date

from ..amounts import ZERO, amount_or_zero, parse_amount
from ..models import Operation, OutputRow
from ..normalizer import normalize_text
from .base import BaseExtractor, ExtractionState, Row, cell, find_label, lookback, value_after_label

logger = logging.getLogger(__name__)

_DATA_MARCADOR_RE = re.compile(r"^\s*data\s*:", re.IGNORECASE)
_PAGADOR_RE = re.compile(r"^PAGADOR\b")
_ROTULO_PAGADOR_RE = re.compile(
    r"^\s*(?:pagador(?:\s+do\s+pagamento)?|nome(?:\s+do\s+pagador)?)\s*[:\-]?\s*",
    re.IGNORECASE,
)
_TITULO_RE = re.compile(r"^\s*(\d+)\s*-\s*(.+?)\s*$")
_PREFIXO_NUMERICO_RE = re.compile(r"^\d+\s*[-.]?\s*")
_LETRA_RE = re.compile(r"[^\W\d_]")

PAYER_FALLBACK_LABELS = ("PAGADOR", "SACADO", "CLIENTE")

AMOUNT_FIELDS = ("principal", "interest", "discount", "bank_fee", "notary_fee", "net_paid")
FIXED_COLUMNS = (4, 5, 6, 7, 8, 9)
RELATIVE_OFFSETS = (1, 2, 3, 4, 5, 6)


@dataclass(frozen=True)
class ReceiptAmounts:
    principal: Decimal = ZERO
    interest: Decimal = ZERO
    discount: Decimal = ZERO
    bank_fee: Decimal = ZERO
    notary_fee: Decimal = ZERO
    net_paid: Decimal = ZERO

    def expected_net(self) -> Decimal:
        return self.principal + self.interest - self.discount - self.bank_fee - self.notary_fee


def _is_date_marker(bruto: str, normalizado: str) -> bool:
    return bool(_DATA_MARCADOR_RE.match(bruto))


def _is_payer_marker(bruto: str, normalizado: str) -> bool:
    return bool(_PAGADOR_RE.match(normalizado))


def _is_payer_fallback_label(bruto: str, normalizado: str) -> bool:
    return ":" in bruto and any(rotulo in normalize_text(bruto.split(":", 1)[0]) for rotulo in PAYER_FALLBACK_LABELS)


def strip_payer_label(texto: str) -> str:
    return _ROTULO_PAGADOR_RE.sub("", texto, count=1).strip()


def match_title(row: Row) -> tuple[int, str, str] | None:
    """(coluna, numero, descricao) quando a linha e um titulo "<numero> - <descricao>"."""
    for idx in range(min(4, len(row))):
        texto = cell(row, idx)
        if not texto or find_date(texto) is not None:
            continue
        encontrado = _TITULO_RE.match(texto)
        if encontrado and _LETRA_RE.search(encontrado.group(2)):
            return idx, encontrado.group(1), encontrado.group(2)
    return None


def clean_title_description(descricao: str) -> str:
    """Remove um numero que tenha sobrado no inicio ("123 - 45 ACME" -> "ACME")."""
    limpa = _PREFIXO_NUMERICO_RE.sub("", descricao).strip()
    return limpa if normalize_text(limpa) else descricao.strip()


def amount_columns(row: Row, coluna_titulo: int) -> tuple[int, ...]:
    """Colunas dos seis valores do titulo: todas fixas ou todas relativas a descricao."""
    relativas = tuple(coluna_titulo + deslocamento for deslocamento in RELATIVE_OFFSETS)
    if coluna_titulo > 0 and parse_amount(cell(row, coluna_titulo + 1)).ok:
        return relativas
    if not any(cell(row, coluna) for coluna in FIXED_COLUMNS):
        return relativas
    return FIXED_COLUMNS


def read_amounts(row: Row, coluna_titulo: int) -> ReceiptAmounts:
    colunas = amount_columns(row, coluna_titulo)
    valores: dict[str, Decimal] = {
        campo: abs(amount_or_zero(cell(row, coluna))) for campo, coluna in zip(AMOUNT_FIELDS, colunas)
    }
    valores_lidos = ReceiptAmounts(**valores)
    if valores_lidos.net_paid == 0:
        return ReceiptAmounts(**{**valores, "net_paid": valores_lidos.expected_net()})
    return valores_lidos


def _opens_block(row: Row) -> bool:
    return find_label(row, _is_date_marker) is not None


def _date_from_row(row: Row) -> date | None:
    rotulo = find_label(row, _is_date_marker)
    if rotulo is not None:
        encontrada = find_date(value_after_label(row, rotulo))
        if encontrada is not None:
            return encontrada
    for idx in range(len(row)):
        encontrada = find_date(cell(row, idx))
        if encontrada is not None:
            return encontrada
    return None


def _payer_from_row(row: Row) -> str | None:
    rotulo = find_label(row, _is_payer_fallback_label)
    if rotulo is None:
        return None
    return strip_payer_label(value_after_label(row, rotulo)) or None


class ReceiptsExtractor(BaseExtractor):
    """Cada titulo gera lancamentos balanceados.

    Debitos: pagador (valor pago), desconto, tarifa bancaria e custas.
    Creditos: conta da descricao do titulo (principal) e juros.
    """

    layout_name = "Recebimentos"

    def extract(self, rows: Sequence[Row]) -> list[OutputRow]:
        estado = ExtractionState()
        saida: list[OutputRow] = []

        for posicao, row in enumerate(rows):
            if not row:
                continue

            rotulo = find_label(row, _is_date_marker)
            if rotulo is not None:
                data_bloco = find_date(value_after_label(row, rotulo))
                if data_bloco is None:
                    logger.warning(f"Linha {posicao + 1}: marcador DATA sem data válida")
                estado.block_date = data_bloco
                continue

            rotulo = find_label(row, _is_payer_marker)
            if rotulo is not None:
                self._set_payer(estado, self._payer_value(row, rotulo))
                continue

            titulo = match_title(row)
            if titulo is None:
                continue
            saida.extend(self._process_title(rows, posicao, row, titulo, estado))

        return saida

    @staticmethod
    def _payer_value(row: Row, rotulo: int) -> str:
        proprio = strip_payer_label(cell(row, rotulo))
        if proprio:
            return proprio
        return strip_payer_label(value_after_label(row, rotulo))

    def _set_payer(self, estado: ExtractionState, pagador: str) -> None:
        estado.debit_description = pagador
        estado.debit_code = self.resolver.resolve_code(pagador, self.debit_prefixes)

    def _process_title(
        self,
        rows: Sequence[Row],
        posicao: int,
        row: Row,
        titulo: tuple[int, str, str],
        estado: ExtractionState,
    ) -> list[OutputRow]:
        coluna, numero, descricao_bruta = titulo
        janela = self.settings.lookback_rows

        if estado.block_date is None:
            estado.block_date = lookback(rows, posicao, janela, _date_from_row, stop=_opens_block)
        if estado.block_date is None:
            logger.warning(f"Linha {posicao + 1}: título {numero} sem data, descartado")
            self.dropped_rows += 1
            return []

        if estado.debit_code is None:
            pagador = lookback(rows, posicao, janela, _payer_from_row)
            if pagador is not None:
                self._set_payer(estado, pagador)

        valores = read_amounts(row, coluna)
        if valores.principal == 0 and valores.net_paid == 0:
            logger.debug(f"Linha {posicao + 1}: título {numero} sem valores, ignorado")
            return []

        descricao = clean_title_description(descricao_bruta)
        pagador = estado.debit_description
        conta_pagador = estado.debit_code or self.settings.unresolved_account
        conta_titulo = self.resolver.resolve_code(descricao, self.credit_prefixes)

        historico = f"RECEBIMENTO {numero} - {descricao}"
        if pagador:
            historico = f"{historico} PAGO POR {pagador}"

        data_titulo = estado.block_date
        cfg = self.settings
        linhas = [self.output_row(Operation.DEBIT, data_titulo, conta_pagador, pagador, valores.net_paid, historico)]
        complementos = (
            (Operation.DEBIT, cfg.discount_account, valores.discount, "DESCONTO CONCEDIDO"),
            (Operation.DEBIT, cfg.bank_fee_account, valores.bank_fee, "TARIFA BANCARIA"),
            (Operation.DEBIT, cfg.notary_fee_account, valores.notary_fee, "CUSTAS DE CARTORIO"),
        )
        for operacao, conta, valor, rotulo in complementos:
            if valor != 0:
                linhas.append(self.output_row(operacao, data_titulo, conta, descricao, valor, f"{rotulo} - {historico}"))

        linhas.append(self.output_row(Operation.CREDIT, data_titulo, conta_titulo, descricao, valores.principal, historico))
        if valores.interest != 0:
            linhas.append(
                self.output_row(
                    Operation.CREDIT,
                    data_titulo,
                    cfg.interest_account,
                    descricao,
                    valores.interest,
                    f"JUROS RECEBIDOS - {historico}",
                )
            )
        return linhas


__all__ = [
    "ReceiptsExtractor",
    "ReceiptAmounts",
    "match_title",
    "clean_title_description",
    "read_amounts",
    "amount_columns",
    "strip_payer_label",
]
