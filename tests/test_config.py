import logging

import pytest
from pydantic import ValidationError

from conversor.app.config import FALLBACK_ACCOUNT, Settings
from conversor.config import setup_logging


def test_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.input_encoding == "latin-1"
    assert cfg.output_encoding == "cp1252"
    assert cfg.unresolved_account == FALLBACK_ACCOUNT
    assert cfg.lookback_rows == 10
    assert cfg.ngram_sizes == (3, 4, 5, 6)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CLEARING_ACCOUNT", "1234")
    monkeypatch.setenv("NGRAM_SIZES", "[4, 3, 4]")
    cfg = Settings(_env_file=None)
    assert cfg.clearing_account == "1234"
    assert cfg.ngram_sizes == (3, 4)


@pytest.mark.parametrize(
    "kwargs",
    [{"ngram_sizes": [0]}, {"ngram_sizes": []}, {"output_encoding": "nao-existe"}, {"lookback_rows": -1}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **kwargs)


def test_setup_logging_accepts_level_names(monkeypatch):
    chamadas = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: chamadas.update(kw))
    setup_logging("debug")
    assert chamadas["level"] == logging.DEBUG
    setup_logging("nivel-invalido")
    assert chamadas["level"] == logging.INFO
