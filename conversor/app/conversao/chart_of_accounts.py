"""Carrega o plano de contas (codigo;classificacao;descricao) em um indice por descricao."""
from __future__ import annotations

import logging
import re
from typing import IO

from .exceptions import AccountsFileError, IngestionError
from .models import AccountEntry, AccountIndex
from .normalizer import clean_text, normalize_text
from .tabular_reader import read_delimited

logger = logging.getLogger(__name__)

_SEPARADORES_CODIGO_RE = re.compile(r"[.,\s]")


def load_accounts(stream: IO[bytes] | bytes, encoding: str = "latin-1") -> AccountIndex:
    """Le o arquivo de contas e devolve o indice descricao normalizada -> contas.

    Linhas com menos de tres campos, descricao vazia ou codigo nao numerico sao
    ignoradas. Dentro de cada descricao as contas ficam ordenadas da
    classificacao mais longa para a mais curta, mantendo a ordem do arquivo em
    caso de empate.
    """
    try:
        dados = stream if isinstance(stream, (bytes, bytearray)) else stream.read()
        linhas = read_delimited(bytes(dados), encoding=encoding)
    except (IngestionError, OSError) as exc:
        raise AccountsFileError(f"erro ao carregar arquivo de contas: {exc}") from exc

    indice = AccountIndex()
    ignoradas = 0
    for linha in linhas:
        entrada = parse_account_row(linha)
        if entrada is None:
            ignoradas += 1
            continue
        chave = normalize_text(entrada.description)
        if not chave:
            ignoradas += 1
            continue
        indice.add(chave, entrada)

    if not indice.keys:
        raise AccountsFileError("arquivo de contas sem nenhuma conta válida")

    for chave, contas in indice.entries.items():
        if len(contas) > 1:
            contas.sort(key=lambda conta: len(conta.classification), reverse=True)

    logger.info(f"Plano de contas carregado: {len(indice)} contas, {len(indice.keys)} descrições, {ignoradas} linhas ignoradas")
    return indice


def parse_account_row(linha: list[str]) -> AccountEntry | None:
    if len(linha) < 3:
        return None
    codigo = _SEPARADORES_CODIGO_RE.sub("", clean_text(linha[0]))
    descricao = clean_text(linha[2])
    if not (codigo.isascii() and codigo.isdigit()) or not descricao:
        return None
    return AccountEntry(code=codigo, classification=clean_text(linha[1]), description=descricao)


__all__ = ["load_accounts", "parse_account_row"]
