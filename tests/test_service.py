import io

import pytest
from typer.testing import CliRunner

from conversor.app.conversao import ConversionService, ConversionVariant
from conversor.app.conversao.exceptions import AccountsFileError, UnsupportedFormatError
from conversor.app.conversao.ledger_writer import HEADER
from main import app, run_conversion

FRANCESINHA = (
    "Relatório de títulos liquidados\n"
    "SIMPLES;DOC1;0001;;ACME LTDA;10/01/2026;05/01/2026;;10,00\n"
    "SIMPLES;DOC2;0002;;Beta Comércio;11/01/2026;05/01/2026;;1.234,50\n"
).encode("latin-1")


def _linhas(conteudo: bytes) -> list[list[str]]:
    return [linha.split(";") for linha in conteudo.decode("cp1252").splitlines()]


@pytest.fixture
def service(settings):
    return ConversionService(settings)


def test_sicredi_csv_end_to_end(service, accounts_bytes):
    linhas = _linhas(service.convert_sicredi(io.BytesIO(FRANCESINHA), "francesinha.csv", accounts_bytes, ["1.1"]))
    assert linhas[0] == HEADER
    assert linhas[1] == ["D", "06/01/2026", "", "88888888", "1244,50", "Títulos recebidos na data"]
    assert [(linha[0], linha[2], linha[3], linha[4]) for linha in linhas[2:]] == [
        ("C", "ACME LTDA", "9487", "10,00"),
        ("C", "Beta Comércio", "201", "1234,50"),
    ]


def test_payments_from_xlsx(service, accounts_bytes, xlsx_builder):
    planilha = xlsx_builder(
        [
            ["Data de pagamento:", "05/01/2026"],
            ["Historico"],
            ["ACME LTDA", "NF 1", "", "Banco Sicredi", 150, None],
            ["Total:"],
        ]
    )
    conteudo = service.convert(ConversionVariant.PAYMENTS, planilha, "pagamentos.xlsx", accounts_bytes, ["2.1.1"], ["1.1.1"])
    assert [(linha[0], linha[3], linha[4]) for linha in _linhas(conteudo)[1:]] == [
        ("D", "9473", "150,00"),
        ("C", "100", "150,00"),
    ]


def test_receipts_from_renamed_spreadsheet(service, accounts_bytes, xlsx_builder):
    planilha = xlsx_builder(
        [
            ["DATA: 07/01/2026"],
            ["Pagador: Banco Sicredi"],
            ["10 - Gama SA", None, None, None, "30,00"],
        ]
    )
    conteudo = service.convert_receipts(io.BytesIO(planilha), "recebimentos.xls", accounts_bytes, ["1.1.1"], ["1.1.2"])
    assert [(linha[0], linha[1], linha[3], linha[4]) for linha in _linhas(conteudo)[1:]] == [
        ("D", "07/01/2026", "100", "30,00"),
        ("C", "07/01/2026", "300", "30,00"),
    ]


def test_variant_accepts_plain_name(service, accounts_bytes):
    conteudo = service.convert("sicredi", FRANCESINHA, "francesinha.csv", accounts_bytes)
    assert len(_linhas(conteudo)) == 4


def test_unsupported_format(service, accounts_bytes):
    with pytest.raises(UnsupportedFormatError):
        service.convert_payments(b"%PDF", "extrato.pdf", accounts_bytes)


def test_empty_accounts_file(service):
    with pytest.raises(AccountsFileError):
        service.convert_sicredi(FRANCESINHA, "francesinha.csv", b"")


def test_run_conversion_writes_output(tmp_path, accounts_bytes):
    lancamentos = tmp_path / "francesinha.csv"
    contas = tmp_path / "contas.csv"
    lancamentos.write_bytes(FRANCESINHA)
    contas.write_bytes(accounts_bytes)

    gerado = run_conversion(ConversionVariant.SICREDI, lancamentos, contas, None)
    assert gerado.parent == tmp_path
    assert gerado.name.startswith("LancamentosFinal_")
    assert gerado.read_bytes().decode("cp1252").startswith("Operação;Data;")


def test_cli_reports_failure_with_exit_code(tmp_path, accounts_bytes):
    lancamentos = tmp_path / "extrato.pdf"
    contas = tmp_path / "contas.csv"
    lancamentos.write_bytes(b"%PDF")
    contas.write_bytes(accounts_bytes)

    resultado = CliRunner().invoke(app, ["pagamentos", str(lancamentos), str(contas)])
    assert resultado.exit_code == 1
    assert not list(tmp_path.glob("LancamentosFinal_*"))


def test_cli_sicredi(tmp_path, accounts_bytes):
    lancamentos = tmp_path / "francesinha.csv"
    contas = tmp_path / "contas.csv"
    saida = tmp_path / "saida.csv"
    lancamentos.write_bytes(FRANCESINHA)
    contas.write_bytes(accounts_bytes)

    resultado = CliRunner().invoke(app, ["sicredi", str(lancamentos), str(contas), "-o", str(saida), "--credit-prefix", "1.1"])
    assert resultado.exit_code == 0, resultado.output
    assert len(_linhas(saida.read_bytes())) == 4


def test_cli_help_states_prefix_sides():
    resultado = CliRunner().invoke(app, ["pagamentos", "--help"])
    assert resultado.exit_code == 0
    assert "--debit-prefix" in resultado.output
    assert "fornecedor" in resultado.output
