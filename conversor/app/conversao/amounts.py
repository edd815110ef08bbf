"""Leitura de valores monetarios em formato brasileiro (e variantes)."""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, NamedTuple

CENTAVOS = Decimal("0.01")
ZERO = Decimal("0.00")

_MOEDA_RE = re.compile(r"^(?:R\$|US\$|\$|€)\s*|\s*(?:R\$|US\$|\$|€)$", re.IGNORECASE)
_PERMITIDOS_RE = re.compile(r"^[0-9.,'\s]+$")
_NAO_DIGITO_RE = re.compile(r"\D")


class ParsedAmount(NamedTuple):
    value: Decimal
    ok: bool


_FALHA = ParsedAmount(ZERO, False)


def round_amount(valor: Decimal) -> Decimal:
    """Arredonda para centavos, metade para longe do zero."""
    arredondado = valor.quantize(CENTAVOS, rounding=ROUND_HALF_UP)
    return arredondado if arredondado != 0 else ZERO


def parse_amount(valor: Any) -> ParsedAmount:
    """Converte "1.234,56", "1234.56", "(10,00)" ou "R$ 5,00-" em Decimal.

    O separador decimal e o que aparece mais a direita; o outro e tratado como
    separador de milhar. Entrada vazia ou invalida devolve ``ok=False`` com
    valor zero, e quem chama segue com zero.
    """
    if valor is None or isinstance(valor, bool):
        return _FALHA
    if isinstance(valor, Decimal):
        if not valor.is_finite():
            return _FALHA
        return ParsedAmount(round_amount(valor), True)
    if isinstance(valor, (int, float)):
        if isinstance(valor, float) and (math.isnan(valor) or math.isinf(valor)):
            return _FALHA
        return ParsedAmount(round_amount(Decimal(str(valor))), True)

    texto = _sem_moeda(str(valor))
    negativo = False
    if texto.startswith("(") and texto.endswith(")"):
        negativo = True
        texto = _sem_moeda(texto[1:-1])
    if texto.startswith("-"):
        negativo = not negativo
        texto = _sem_moeda(texto[1:])
    elif texto.endswith("-"):
        negativo = not negativo
        texto = _sem_moeda(texto[:-1])
    elif texto.startswith("+"):
        texto = _sem_moeda(texto[1:])

    if not texto or not _PERMITIDOS_RE.match(texto):
        return _FALHA

    posicao = max(texto.rfind("."), texto.rfind(","))
    if posicao >= 0:
        inteiro = _NAO_DIGITO_RE.sub("", texto[:posicao])
        fracao = _NAO_DIGITO_RE.sub("", texto[posicao + 1 :])
    else:
        inteiro = _NAO_DIGITO_RE.sub("", texto)
        fracao = ""
    if not inteiro and not fracao:
        return _FALHA

    try:
        numero = Decimal(f"{inteiro or '0'}.{fracao or '0'}")
    except InvalidOperation:
        return _FALHA
    if negativo:
        numero = -numero
    return ParsedAmount(round_amount(numero), True)


def amount_or_zero(valor: Any) -> Decimal:
    return parse_amount(valor).value


def format_amount(valor: Decimal) -> str:
    """Decimal -> "1234,50" (virgula decimal, sem separador de milhar)."""
    return f"{round_amount(valor):.2f}".replace(".", ",")


def _sem_moeda(texto: str) -> str:
    anterior = None
    texto = texto.strip()
    while texto != anterior:
        anterior = texto
        texto = _MOEDA_RE.sub("", texto).strip()
    return texto


__all__ = [
    "ParsedAmount",
    "parse_amount",
    "amount_or_zero",
    "format_amount",
    "round_amount",
    "ZERO",
]
