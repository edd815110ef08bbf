import io
from datetime import datetime

import pandas as pd
import pytest

from conversor.app.conversao import tabular_reader
from conversor.app.conversao.exceptions import IngestionError, UnsupportedFormatError
from conversor.app.conversao.tabular_reader import cell_text, file_extension, load_rows


def test_csv_is_decoded_from_latin1_and_split_on_semicolon():
    dados = "SIMPLES;José da Silva;10,00\nOUTRA;Açúcar\n".encode("latin-1")
    linhas = load_rows(io.BytesIO(dados), "francesinha.csv")
    assert linhas == [["SIMPLES", "José da Silva", "10,00"], ["OUTRA", "Açúcar"]]


def test_csv_tolerates_quotes_and_ragged_rows():
    dados = b'"A;B";C\nD\n;;;E\n'
    linhas = load_rows(dados, ".csv")
    assert linhas == [["A;B", "C"], ["D"], ["", "", "", "E"]]


def test_xlsx_sheets_are_flattened_in_order(xlsx_builder):
    dados = xlsx_builder(
        [["Data:", datetime(2026, 1, 5)], ["ACME", 100, 10.5]],
        [["Segunda aba", None, "fim"]],
    )
    linhas = load_rows(io.BytesIO(dados), "Relatorio.XLSX")
    assert linhas == [
        ["Data:", "05/01/2026"],
        ["ACME", "100", "10.5"],
        ["Segunda aba", "", "fim"],
    ]


def test_xls_falls_back_to_xlsx_reader(xlsx_builder):
    dados = xlsx_builder([["renomeado", "1,00"]])
    assert load_rows(dados, "janeiro.xls") == [["renomeado", "1,00"]]


@pytest.mark.parametrize("nome", ["quebrado.xlsx", "quebrado.xls"])
def test_unreadable_spreadsheet_is_fatal(nome):
    with pytest.raises(IngestionError):
        load_rows(b"isto nao e uma planilha", nome)


def test_unsupported_extension_fails_fast():
    with pytest.raises(UnsupportedFormatError) as exc:
        load_rows(b"%PDF-1.4", "extrato.pdf")
    assert isinstance(exc.value, ValueError)
    assert ".pdf" in str(exc.value)


def test_file_extension():
    assert file_extension("Relatorio.XLSX") == ".xlsx"
    assert file_extension("csv") == ".csv"
    assert file_extension(".xls") == ".xls"
    assert file_extension("") == ""


def test_cell_text_conversions():
    assert cell_text(None) == ""
    assert cell_text(float("nan")) == ""
    assert cell_text(12.0) == "12"
    assert cell_text(0.5) == "0.5"
    assert cell_text(datetime(2026, 2, 1, 0, 0)) == "01/02/2026"
    assert cell_text("  texto ") == "texto"


def test_xls_is_read_with_xlrd_first(monkeypatch):
    engines = []

    def fake_read_excel(buffer, sheet_name=None, header=None, engine=None):
        engines.append(engine)
        return {"Plan1": pd.DataFrame([["SIMPLES", 10.0, None]])}

    monkeypatch.setattr(tabular_reader.pd, "read_excel", fake_read_excel)
    assert load_rows(b"\xd0\xcf\x11\xe0", "legado.xls") == [["SIMPLES", "10"]]
    assert engines == ["xlrd"]
