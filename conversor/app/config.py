"""Configuracoes centralizadas carregadas via .env."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_DIR = PROJECT_ROOT / "conversor"
ENV_FILE = PACKAGE_DIR / ".env"

FALLBACK_ACCOUNT = "99999999"


class Settings(BaseSettings):
    """Parametros usados por todas as conversoes de lancamentos."""

    input_encoding: str = Field(default="latin-1", alias="INPUT_ENCODING")
    output_encoding: str = Field(default="cp1252", alias="OUTPUT_ENCODING")
    unresolved_account: str = Field(default=FALLBACK_ACCOUNT, alias="UNRESOLVED_ACCOUNT")
    clearing_account: str = Field(default=FALLBACK_ACCOUNT, alias="CLEARING_ACCOUNT")
    interest_account: str = Field(default=FALLBACK_ACCOUNT, alias="INTEREST_ACCOUNT")
    discount_account: str = Field(default=FALLBACK_ACCOUNT, alias="DISCOUNT_ACCOUNT")
    bank_fee_account: str = Field(default=FALLBACK_ACCOUNT, alias="BANK_FEE_ACCOUNT")
    notary_fee_account: str = Field(default=FALLBACK_ACCOUNT, alias="NOTARY_FEE_ACCOUNT")
    lookback_rows: int = Field(default=10, alias="LOOKBACK_ROWS", ge=0)
    ngram_sizes: tuple[int, ...] = Field(default=(3, 4, 5, 6), alias="NGRAM_SIZES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("ngram_sizes", mode="after")
    @classmethod
    def validate_ngram_sizes(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v or any(size < 1 for size in v):
            raise ValueError("NGRAM_SIZES deve conter apenas inteiros positivos")
        return tuple(sorted(set(v)))

    @field_validator("input_encoding", "output_encoding", mode="after")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"Codificacao desconhecida: {v}") from exc
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma unica instancia de Settings para toda a aplicacao."""
    return Settings()
