"""Francesinha Sicredi: uma linha "SIMPLES" por boleto liquidado."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta
from itertools import groupby
from operator import attrgetter

from conversor.app.utils.dates import parse_date

from ..amounts import ZERO, parse_amount
from ..models import Operation, OutputRow, Transaction
from .base import BaseExtractor, Row, cell

logger = logging.getLogger(__name__)

TAG = "SIMPLES"
MIN_COLUMNS = 9

# Colunas da francesinha
COL_DOCUMENTO = 1
COL_BOLETO = 2
COL_PAGADOR = 4
COL_VENCIMENTO = 5
COL_LIQUIDACAO = 6
COL_VALOR = 8

DAILY_NARRATIVE = "Títulos recebidos na data"


class SicrediExtractor(BaseExtractor):
    """Agrupa os boletos por data de liquidacao.

    Para cada dia: um debito com o total do dia na conta transitoria, datado
    no dia seguinte a liquidacao, seguido de um credito por boleto na conta
    do pagador.
    """

    layout_name = "Sicredi"

    def extract(self, rows: Sequence[Row]) -> list[OutputRow]:
        lancamentos = self.parse_transactions(rows)
        lancamentos.sort(key=attrgetter("date"))

        saida: list[OutputRow] = []
        for _, grupo in groupby(lancamentos, key=attrgetter("date")):
            saida.extend(self._process_group(list(grupo)))
        return saida

    def parse_transactions(self, rows: Sequence[Row]) -> list[Transaction]:
        lancamentos: list[Transaction] = []
        for numero, row in enumerate(rows, 1):
            if len(row) < MIN_COLUMNS or not cell(row, 0).upper().startswith(TAG):
                continue

            data_liquidacao = parse_date(cell(row, COL_LIQUIDACAO))
            if data_liquidacao is None:
                logger.debug(f"Linha {numero}: data de liquidação inválida ({cell(row, COL_LIQUIDACAO)!r}), ignorada")
                self.dropped_rows += 1
                continue

            valor, ok = parse_amount(cell(row, COL_VALOR))
            if not ok:
                logger.debug(f"Linha {numero}: valor inválido ({cell(row, COL_VALOR)!r}), considerado zero")

            pagador = cell(row, COL_PAGADOR)
            historico = (
                f"RECEBIMENTO DE {pagador} CONFORME BOLETO {cell(row, COL_BOLETO)} "
                f"COM VENCIMENTO EM {cell(row, COL_VENCIMENTO)} REFERENTE DOCUMENTO {cell(row, COL_DOCUMENTO)}"
            )
            lancamentos.append(
                Transaction(date=data_liquidacao, description=pagador, amount=valor, ancillary_text=historico)
            )
        return lancamentos

    def _process_group(self, grupo: list[Transaction]) -> list[OutputRow]:
        if not grupo:
            return []
        total = sum((lancamento.amount for lancamento in grupo), ZERO)
        data_lancamento = grupo[0].date + timedelta(days=1)

        linhas = [
            self.output_row(
                Operation.DEBIT,
                data_lancamento,
                self.settings.clearing_account,
                "",
                total,
                DAILY_NARRATIVE,
            )
        ]
        for lancamento in grupo:
            codigo = self.resolver.resolve_code(lancamento.description, self.credit_prefixes)
            linhas.append(
                self.output_row(
                    Operation.CREDIT,
                    data_lancamento,
                    codigo,
                    lancamento.description,
                    lancamento.amount,
                    lancamento.ancillary_text,
                )
            )
        return linhas


__all__ = ["SicrediExtractor", "DAILY_NARRATIVE"]
