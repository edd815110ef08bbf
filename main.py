"""
Linha de comando do conversor de lancamentos.
Le o arquivo de lancamentos e o plano de contas e grava o CSV de importacao.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

# Permite execucao direta (python main.py) a partir de qualquer diretorio
ROOT_DIR = Path(__file__).resolve().parent
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from conversor.app.conversao import ConversionError, ConversionService, ConversionVariant  # noqa: E402
from conversor.config import setup_logging  # noqa: E402

logger = logging.getLogger("main")

app = typer.Typer(add_completion=False, help="Converte extratos e relatórios em lançamentos contábeis.")

TransactionsArg = Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Arquivo de lançamentos (.csv, .xls, .xlsx)")]
AccountsArg = Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Plano de contas (codigo;classificacao;descricao)")]
OutputOpt = Annotated[Optional[Path], typer.Option("--output", "-o", help="Arquivo de saída")]
# Os prefixos seguem o lado do lancamento: em pagamentos o fornecedor e debitado
# (ex. 2.1.1) e o banco creditado (ex. 1.1.1)
DebitOpt = Annotated[
    Optional[list[str]],
    typer.Option("--debit-prefix", help="Prefixo da conta debitada (pagamentos: fornecedor; recebimentos: pagador)"),
]
CreditOpt = Annotated[
    Optional[list[str]],
    typer.Option("--credit-prefix", help="Prefixo da conta creditada (pagamentos: banco; recebimentos e sicredi: cliente)"),
]


def run_conversion(
    variant: ConversionVariant,
    transactions: Path,
    accounts: Path,
    output: Path | None,
    debit_prefixes: list[str] | None = None,
    credit_prefixes: list[str] | None = None,
) -> Path:
    """Executa uma conversao e grava o resultado, retornando o caminho gerado."""
    if output is None:
        output = transactions.with_name(f"LancamentosFinal_{datetime.now():%Y%m%d_%H%M%S}.csv")

    service = ConversionService()
    with transactions.open("rb") as lancamentos, accounts.open("rb") as contas:
        conteudo = service.convert(
            variant,
            lancamentos,
            transactions.name,
            contas,
            debit_prefixes=debit_prefixes,
            credit_prefixes=credit_prefixes,
        )
    output.write_bytes(conteudo)
    logger.info(f"Arquivo gerado: {output}")
    return output


def _execute(variant: ConversionVariant, *args, **kwargs) -> None:
    setup_logging()
    try:
        run_conversion(variant, *args, **kwargs)
    except ConversionError as e:
        logger.error(f"Erro ao processar os arquivos: {e}")
        raise typer.Exit(code=1) from e


@app.command("sicredi")
def cmd_sicredi(
    transactions: TransactionsArg,
    accounts: AccountsArg,
    output: OutputOpt = None,
    credit_prefix: CreditOpt = None,
) -> None:
    """Francesinha Sicredi (boletos liquidados)."""
    _execute(ConversionVariant.SICREDI, transactions, accounts, output, credit_prefixes=credit_prefix)


@app.command("pagamentos")
def cmd_pagamentos(
    transactions: TransactionsArg,
    accounts: AccountsArg,
    output: OutputOpt = None,
    debit_prefix: DebitOpt = None,
    credit_prefix: CreditOpt = None,
) -> None:
    """Relatório de pagamentos: fornecedor a débito, banco a crédito."""
    _execute(ConversionVariant.PAYMENTS, transactions, accounts, output, debit_prefix, credit_prefix)


@app.command("recebimentos")
def cmd_recebimentos(
    transactions: TransactionsArg,
    accounts: AccountsArg,
    output: OutputOpt = None,
    debit_prefix: DebitOpt = None,
    credit_prefix: CreditOpt = None,
) -> None:
    """Relatório de recebimentos: pagador a débito, título a crédito."""
    _execute(ConversionVariant.RECEIPTS, transactions, accounts, output, debit_prefix, credit_prefix)


if __name__ == "__main__":
    app()
