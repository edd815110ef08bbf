"""
Leitura unificada dos arquivos de lancamentos (.csv, .xls, .xlsx).
Qualquer formato sai como lista de linhas, cada linha uma lista de textos.
"""
from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import IO, Any

import pandas as pd

from conversor.app.utils.dates import format_date

from .exceptions import IngestionError, UnsupportedFormatError

logger = logging.getLogger(__name__)

Row = list[str]

SUPPORTED_EXTENSIONS = (".csv", ".xls", ".xlsx")
_ENGINES = {".xls": "xlrd", ".xlsx": "openpyxl"}


def load_rows(stream: IO[bytes] | bytes, filename: str, encoding: str = "latin-1") -> list[Row]:
    """Le o arquivo de lancamentos conforme a extensao de ``filename``.

    ``filename`` pode ser o nome original do upload ou so a extensao
    (".xls"). Extensao desconhecida e o unico erro de formato que nao tem
    recuperacao.
    """
    extensao = file_extension(filename)
    if extensao not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(f"formato de arquivo de lançamentos não suportado: {extensao or filename!r}")

    dados = _read_bytes(stream)
    if extensao == ".csv":
        return read_delimited(dados, encoding=encoding)

    if extensao == ".xls":
        try:
            return read_spreadsheet(dados, engine=_ENGINES[".xls"])
        except Exception as exc:
            # Arquivos .xlsx renomeados para .xls sao comuns nos exports dos bancos
            logger.warning(f"Falha ao abrir como .xls ({exc}); tentando leitor .xlsx")
            try:
                return read_spreadsheet(dados, engine=_ENGINES[".xlsx"])
            except Exception as fallback_exc:
                raise IngestionError(f"erro ao converter .xls: {exc}") from fallback_exc

    try:
        return read_spreadsheet(dados, engine=_ENGINES[".xlsx"])
    except Exception as exc:
        raise IngestionError(f"erro ao converter .xlsx: {exc}") from exc


def read_delimited(dados: bytes, encoding: str = "latin-1", delimiter: str = ";") -> list[Row]:
    """CSV legado: codificacao de 8 bits, ';' como separador, linhas de tamanho variavel."""
    try:
        texto = dados.decode(encoding)
    except UnicodeDecodeError as exc:
        raise IngestionError(f"arquivo não está em {encoding}: {exc}") from exc

    reader = csv.reader(io.StringIO(texto, newline=""), delimiter=delimiter, quotechar='"')
    try:
        linhas = [list(linha) for linha in reader]
    except csv.Error as exc:
        raise IngestionError(f"CSV ilegível: {exc}") from exc
    logger.debug(f"CSV lido: {len(linhas)} linhas")
    return linhas


def read_spreadsheet(dados: bytes, engine: str) -> list[Row]:
    """Achata todas as abas, na ordem do arquivo, em uma unica lista de linhas."""
    planilhas = pd.read_excel(io.BytesIO(dados), sheet_name=None, header=None, engine=engine)
    linhas: list[Row] = []
    for nome, df in planilhas.items():
        antes = len(linhas)
        for registro in df.itertuples(index=False, name=None):
            celulas = [cell_text(valor) for valor in registro]
            while celulas and celulas[-1] == "":
                celulas.pop()
            linhas.append(celulas)
        logger.debug(f"Aba {nome!r}: {len(linhas) - antes} linhas ({engine})")
    return linhas


def cell_text(valor: Any) -> str:
    """Converte o valor de uma celula para o texto que o CSV equivalente teria."""
    if valor is None:
        return ""
    if isinstance(valor, str):
        return valor.strip()
    if isinstance(valor, (datetime, date)):
        if pd.isna(valor):
            return ""
        return format_date(valor)
    if isinstance(valor, bool):
        return str(valor).upper()
    if isinstance(valor, float):
        if pd.isna(valor):
            return ""
        if valor.is_integer():
            return str(int(valor))
        return str(valor)
    if pd.isna(valor):
        return ""
    return str(valor).strip()


def file_extension(filename: str) -> str:
    nome = (filename or "").strip().lower()
    if "." not in nome:
        return f".{nome}" if nome else ""
    return nome[nome.rfind(".") :]


def _read_bytes(stream: IO[bytes] | bytes) -> bytes:
    if isinstance(stream, (bytes, bytearray)):
        return bytes(stream)
    try:
        return stream.read()
    except OSError as exc:
        raise IngestionError(f"falha ao ler o arquivo de lançamentos: {exc}") from exc


__all__ = ["load_rows", "read_delimited", "read_spreadsheet", "cell_text", "file_extension", "SUPPORTED_EXTENSIONS"]
