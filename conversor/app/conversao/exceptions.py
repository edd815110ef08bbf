"""Erros fatais de conversao. Problemas de linha nunca viram excecao."""


class ConversionError(Exception):
    """Falha que aborta a conversao inteira."""


class UnsupportedFormatError(ConversionError, ValueError):
    """Extensao de arquivo de lancamentos nao suportada."""


class IngestionError(ConversionError):
    """Arquivo de lancamentos ilegivel."""


class AccountsFileError(ConversionError):
    """Plano de contas ilegivel ou vazio."""


class LedgerWriteError(ConversionError):
    """Falha ao codificar ou gravar o arquivo final."""


__all__ = [
    "ConversionError",
    "UnsupportedFormatError",
    "IngestionError",
    "AccountsFileError",
    "LedgerWriteError",
]
