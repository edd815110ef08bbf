"""Conversao de extratos e relatorios em lancamentos contabeis."""
from .account_resolver import AccountResolver
from .chart_of_accounts import load_accounts
from .exceptions import (
    AccountsFileError,
    ConversionError,
    IngestionError,
    LedgerWriteError,
    UnsupportedFormatError,
)
from .normalizer import normalize_text
from .service import ConversionService, ConversionVariant
from .tabular_reader import load_rows

__all__ = [
    "AccountResolver",
    "ConversionService",
    "ConversionVariant",
    "load_accounts",
    "load_rows",
    "normalize_text",
    "ConversionError",
    "UnsupportedFormatError",
    "IngestionError",
    "AccountsFileError",
    "LedgerWriteError",
]
