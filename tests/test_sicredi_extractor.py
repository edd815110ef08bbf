from conversor.app.conversao.extractors.sicredi import DAILY_NARRATIVE, SicrediExtractor
from conversor.app.conversao.models import Operation


def _linha(documento, boleto, pagador, vencimento, liquidacao, valor):
    return ["SIMPLES", documento, boleto, "", pagador, vencimento, liquidacao, "", valor]


ROWS = [
    ["Cooperativa", "Relatório de títulos liquidados"],
    _linha("DOC4", "0004", "GAMA SA", "12/01/2026", "06/01/2026", "7,50"),
    _linha("DOC1", "0001", "ACME LTDA", "10/01/2026", "05/01/2026", "10,00"),
    _linha("DOC2", "0002", "BETA COMERCIO", "10/01/2026", "05/01/2026", "20,00"),
    ["SIMPLES", "curta"],
    _linha("DOC9", "0009", "ACME LTDA", "10/01/2026", "data ruim", "1,00"),
    _linha("DOC3", "0003", "ACME LTDA", "12/01/2026", "05/01/2026", "5,00"),
    ["DESCONTADA", "DOC5", "0005", "", "ACME LTDA", "10/01/2026", "05/01/2026", "", "99,00"],
]


def test_groups_by_settlement_date(resolver, settings):
    saida = SicrediExtractor(resolver, settings=settings).extract(ROWS)

    assert [(row.operation, row.date, row.account_code, row.amount) for row in saida] == [
        (Operation.DEBIT, "06/01/2026", "88888888", "35,00"),
        (Operation.CREDIT, "06/01/2026", "9487", "10,00"),
        (Operation.CREDIT, "06/01/2026", "201", "20,00"),
        (Operation.CREDIT, "06/01/2026", "9487", "5,00"),
        (Operation.DEBIT, "07/01/2026", "88888888", "7,50"),
        (Operation.CREDIT, "07/01/2026", "300", "7,50"),
    ]
    assert saida[0].narrative == DAILY_NARRATIVE
    assert saida[0].counterparty_description == ""


def test_credit_rows_carry_boleto_narrative(resolver, settings):
    saida = SicrediExtractor(resolver, settings=settings).extract(ROWS)
    assert saida[1].counterparty_description == "ACME LTDA"
    assert saida[1].narrative == (
        "RECEBIMENTO DE ACME LTDA CONFORME BOLETO 0001 COM VENCIMENTO EM 10/01/2026 REFERENTE DOCUMENTO DOC1"
    )


def test_bad_rows_are_skipped_and_bad_amounts_become_zero(resolver, settings):
    extrator = SicrediExtractor(resolver, settings=settings)
    saida = extrator.extract([_linha("D", "B", "ACME LTDA", "", "31/12/2025", "sem valor")])
    assert [row.amount for row in saida] == ["0,00", "0,00"]
    assert saida[0].date == "01/01/2026"

    assert extrator.extract([_linha("D", "B", "ACME", "", "xx", "1,00")]) == []
    assert extrator.dropped_rows == 1


def test_credit_prefixes_scope_the_payer(resolver, settings):
    saida = SicrediExtractor(resolver, credit_prefixes=["2.1.1"], settings=settings).extract(
        [_linha("D", "B", "ACME LTDA", "", "05/01/2026", "1,00")]
    )
    assert saida[1].account_code == "9473"


def test_empty_input(resolver, settings):
    assert SicrediExtractor(resolver, settings=settings).extract([]) == []
