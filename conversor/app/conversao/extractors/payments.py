"""
Relatorio de pagamentos: blocos por data de pagamento com secao de historico.

Layout esperado (colunas a partir de 0) dentro da secao HISTORICO:
fornecedor | documento | vencimento | banco | valor original | valor pago.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from conversor.app.utils.dates import find_date

from ..amounts import parse_amount
from ..models import Operation, OutputRow
from ..normalizer import normalize_text
from .base import BaseExtractor, ExtractionState, Row, cell, find_label, lookback, value_after_label

logger = logging.getLogger(__name__)

DATE_LABELS = ("DATA DE PAGAMENTO", "DATA PAGAMENTO", "DATA DO PAGAMENTO", "DT PAGAMENTO")
BANK_LABELS = ("BANCO", "PORTADOR", "CONTA")
NARRATIVE_START = "HISTORICO"
NARRATIVE_TOTALS = ("TOTAL", "TOTAL HISTORICO", "TOTAL DO HISTORICO", "TOTAL GERAL", "TOTAL DO DIA", "TOTAL PAGO")

BANK_KEYWORDS = (
    "SICREDI",
    "SICOOB",
    "BRADESCO",
    "ITAU",
    "SANTANDER",
    "CAIXA",
    "BANCO DO BRASIL",
    "BB",
    "CRESOL",
    "UNICRED",
    "BANRISUL",
    "SAFRA",
    "INTER",
    "NUBANK",
    "BTG",
    "C6",
)

COL_FAVORECIDO = 0
COL_DOCUMENTO = 1
# Valor pago; se vazio, valor original; por ultimo a coluna seguinte
AMOUNT_COLUMNS = (5, 4, 6)
BANK_COLUMNS = (3, 2, 6, 7)


def detect_bank(row: Row, columns: Sequence[int] = BANK_COLUMNS) -> str:
    """Nome do banco citado na linha, procurando primeiro nas colunas usuais."""
    ordem = list(columns) + [idx for idx in range(COL_DOCUMENTO + 1, len(row)) if idx not in columns]
    for idx in ordem:
        texto = cell(row, idx)
        if texto and is_bank_name(texto):
            return texto
    return ""


def is_bank_name(texto: str) -> bool:
    tokens = normalize_text(texto).split()
    for palavra_chave in BANK_KEYWORDS:
        alvo = palavra_chave.split()
        for inicio in range(len(tokens) - len(alvo) + 1):
            if tokens[inicio : inicio + len(alvo)] == alvo:
                return True
    return False


def _is_date_label(bruto: str, normalizado: str) -> bool:
    return normalizado.startswith(DATE_LABELS)


def _is_bank_label(bruto: str, normalizado: str) -> bool:
    return ":" in bruto and normalizado.split(" ", 1)[0] in BANK_LABELS


def _is_narrative_start(bruto: str, normalizado: str) -> bool:
    return normalizado == NARRATIVE_START


def _is_narrative_total(bruto: str, normalizado: str) -> bool:
    # "TOTAL DISTRIBUIDORA LTDA" e favorecido, nao fechamento de secao
    if normalizado in NARRATIVE_TOTALS:
        return True
    return normalizado.startswith("TOTAL") and bruto.rstrip().endswith(":")


def _opens_block(row: Row) -> bool:
    return find_label(row, _is_date_label) is not None


def is_subtotal_row(row: Row) -> bool:
    """Linha "TOTAL ..." sem documento e com valor: subtotal do relatorio, nunca um favorecido."""
    if normalize_text(cell(row, COL_FAVORECIDO)).split(" ", 1)[0] != "TOTAL" or cell(row, COL_DOCUMENTO):
        return False
    return any(parse_amount(cell(row, coluna)).ok for coluna in AMOUNT_COLUMNS)


def _any_date(row: Row) -> date | None:
    for idx in range(len(row)):
        encontrada = find_date(cell(row, idx))
        if encontrada is not None:
            return encontrada
    return None


class PaymentsExtractor(BaseExtractor):
    """Gera um debito para o fornecedor e um credito para o banco por pagamento.

    O fornecedor e resolvido com os prefixos de debito (passivo, ex. 2.1.1) e
    o banco com os de credito (disponivel, ex. 1.1.1), porque a mesma pessoa
    pode existir no ativo e no passivo. Cada prefixo acompanha o lado do
    lancamento em que a conta aparece, nao o tipo de cadastro.
    """

    layout_name = "Pagamentos"

    def extract(self, rows: Sequence[Row]) -> list[OutputRow]:
        estado = ExtractionState()
        saida: list[OutputRow] = []

        for posicao, row in enumerate(rows):
            if not row:
                continue

            rotulo = find_label(row, _is_date_label)
            if rotulo is not None:
                data_bloco = find_date(value_after_label(row, rotulo)) or find_date(cell(row, rotulo))
                if data_bloco is None:
                    logger.warning(f"Linha {posicao + 1}: rótulo de data sem data válida")
                estado.block_date = data_bloco
                continue

            if find_label(row, _is_narrative_start) is not None:
                estado.in_narrative = True
                continue
            if find_label(row, _is_narrative_total) is not None:
                estado.in_narrative = False
                continue
            if estado.in_narrative and is_subtotal_row(row):
                logger.debug(f"Linha {posicao + 1}: linha de total ({cell(row, COL_FAVORECIDO)!r}) encerra o histórico")
                estado.in_narrative = False
                continue

            if not estado.in_narrative:
                rotulo = find_label(row, _is_bank_label)
                if rotulo is not None:
                    estado.bank = value_after_label(row, rotulo)
                continue

            saida.extend(self._process_row(rows, posicao, row, estado))

        return saida

    def _process_row(self, rows: Sequence[Row], posicao: int, row: Row, estado: ExtractionState) -> list[OutputRow]:
        favorecido = cell(row, COL_FAVORECIDO)
        if not normalize_text(favorecido) or parse_amount(favorecido).ok:
            return []

        valor = None
        for coluna in AMOUNT_COLUMNS:
            candidato = parse_amount(cell(row, coluna))
            if candidato.ok and candidato.value != 0:
                valor = abs(candidato.value)
                break
        if valor is None:
            logger.debug(f"Linha {posicao + 1}: sem valor de pagamento, ignorada")
            return []

        data_pagamento = estado.block_date or lookback(
            rows, posicao, self.settings.lookback_rows, _any_date, stop=_opens_block
        )
        if data_pagamento is None:
            logger.warning(f"Linha {posicao + 1}: pagamento a {favorecido!r} sem data de pagamento, descartado")
            self.dropped_rows += 1
            return []

        banco = detect_bank(row) or estado.bank
        documento = cell(row, COL_DOCUMENTO)
        historico = f"PAGAMENTO A {favorecido}"
        if documento:
            historico = f"{historico} DOCUMENTO {documento}"

        conta_favorecido = self.resolver.resolve_code(favorecido, self.debit_prefixes)
        conta_banco = self.resolver.resolve_code(banco, self.credit_prefixes)
        return [
            self.output_row(Operation.DEBIT, data_pagamento, conta_favorecido, favorecido, valor, historico),
            self.output_row(Operation.CREDIT, data_pagamento, conta_banco, banco, valor, historico),
        ]


__all__ = ["PaymentsExtractor", "detect_bank", "is_bank_name", "is_subtotal_row", "BANK_KEYWORDS"]
