"""
Orquestra uma conversao: leitura -> plano de contas -> extracao -> arquivo final.
Cada chamada monta seus proprios indice, resolvedor e extrator.
"""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import IO

from loguru import logger

from conversor.app.config import Settings, get_settings

from .account_resolver import AccountResolver
from .chart_of_accounts import load_accounts
from .extractors import BaseExtractor, PaymentsExtractor, ReceiptsExtractor, SicrediExtractor
from .ledger_writer import write_ledger
from .tabular_reader import load_rows

Stream = IO[bytes] | bytes


class ConversionVariant(str, Enum):
    SICREDI = "sicredi"
    PAYMENTS = "pagamentos"
    RECEIPTS = "recebimentos"


_EXTRACTORS: dict[ConversionVariant, type[BaseExtractor]] = {
    ConversionVariant.SICREDI: SicrediExtractor,
    ConversionVariant.PAYMENTS: PaymentsExtractor,
    ConversionVariant.RECEIPTS: ReceiptsExtractor,
}


class ConversionService:
    """Ponto de entrada das conversoes; uma funcao pura por layout."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def convert(
        self,
        variant: ConversionVariant | str,
        transactions_file: Stream,
        filename: str,
        accounts_file: Stream,
        debit_prefixes: Iterable[str] | None = None,
        credit_prefixes: Iterable[str] | None = None,
    ) -> bytes:
        variant = ConversionVariant(variant)
        cfg = self.settings

        rows = load_rows(transactions_file, filename, encoding=cfg.input_encoding)
        index = load_accounts(accounts_file, encoding=cfg.input_encoding)
        resolver = AccountResolver(index, fallback_code=cfg.unresolved_account, ngram_sizes=cfg.ngram_sizes)

        extractor = _EXTRACTORS[variant](
            resolver,
            debit_prefixes=debit_prefixes,
            credit_prefixes=credit_prefixes,
            settings=cfg,
        )
        output_rows = extractor.extract(rows)
        conteudo = write_ledger(output_rows, encoding=cfg.output_encoding)

        logger.info(
            f"Conversão {extractor.layout_name} ({filename}): {len(rows)} linhas lidas, "
            f"{len(output_rows)} lançamentos, {extractor.dropped_rows} descartadas, "
            f"{resolver.unresolved_count} sem conta"
        )
        logger.debug(f"Resolução de contas: {resolver.stats()}")
        if resolver.unresolved_count:
            logger.warning(f"{resolver.unresolved_count} descrições ficaram na conta {cfg.unresolved_account}")
        return conteudo

    def convert_sicredi(
        self,
        transactions_file: Stream,
        filename: str,
        accounts_file: Stream,
        credit_prefixes: Iterable[str] | None = None,
    ) -> bytes:
        return self.convert(
            ConversionVariant.SICREDI,
            transactions_file,
            filename,
            accounts_file,
            credit_prefixes=credit_prefixes,
        )

    def convert_payments(
        self,
        transactions_file: Stream,
        filename: str,
        accounts_file: Stream,
        debit_prefixes: Iterable[str] | None = None,
        credit_prefixes: Iterable[str] | None = None,
    ) -> bytes:
        return self.convert(
            ConversionVariant.PAYMENTS,
            transactions_file,
            filename,
            accounts_file,
            debit_prefixes,
            credit_prefixes,
        )

    def convert_receipts(
        self,
        transactions_file: Stream,
        filename: str,
        accounts_file: Stream,
        debit_prefixes: Iterable[str] | None = None,
        credit_prefixes: Iterable[str] | None = None,
    ) -> bytes:
        return self.convert(
            ConversionVariant.RECEIPTS,
            transactions_file,
            filename,
            accounts_file,
            debit_prefixes,
            credit_prefixes,
        )


__all__ = ["ConversionService", "ConversionVariant"]
