"""Fixtures compartilhadas: plano de contas em memoria, settings isolados e planilhas geradas com openpyxl."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from typing import Any

import pytest
from openpyxl import Workbook

from conversor.app.config import Settings
from conversor.app.conversao.account_resolver import AccountResolver
from conversor.app.conversao.chart_of_accounts import load_accounts
from conversor.app.conversao.models import AccountIndex

ACCOUNTS_CSV = """Codigo;Classificacao;Descricao
9487;1.1.2;ACME LTDA
9473;2.1.1;ACME LTDA
100;1.1.1.01;Banco Sicredi
101;1.1.1.02;Banco Bradesco S.A.
200;2.1.1.01.001;Fornecedor Beta Comércio
201;1.1.2.01;Beta Comercio
300;1.1.2.02;Gama SA
"""


@pytest.fixture
def accounts_bytes() -> bytes:
    return ACCOUNTS_CSV.encode("latin-1")


@pytest.fixture
def account_index(accounts_bytes: bytes) -> AccountIndex:
    return load_accounts(accounts_bytes)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        unresolved_account="99999999",
        clearing_account="88888888",
        interest_account="9001",
        discount_account="9002",
        bank_fee_account="9003",
        notary_fee_account="9004",
        lookback_rows=10,
    )


@pytest.fixture
def resolver(account_index: AccountIndex, settings: Settings) -> AccountResolver:
    return AccountResolver(account_index, fallback_code=settings.unresolved_account, ngram_sizes=settings.ngram_sizes)


@pytest.fixture
def xlsx_builder() -> Callable[..., bytes]:
    """Monta um .xlsx em memoria; cada argumento e uma aba (lista de linhas)."""

    def build(*sheets: Sequence[Sequence[Any]]) -> bytes:
        wb = Workbook()
        wb.remove(wb.active)
        for numero, linhas in enumerate(sheets, 1):
            ws = wb.create_sheet(title=f"Aba{numero}")
            for linha in linhas:
                ws.append(list(linha))
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return build
