"""Estruturas de dados compartilhadas pelas conversoes."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class AccountEntry:
    """Uma linha do plano de contas."""

    code: str
    classification: str
    description: str


@dataclass
class AccountIndex:
    """Descricao normalizada -> contas, na ordem em que apareceram no arquivo."""

    entries: dict[str, list[AccountEntry]] = field(default_factory=dict)
    keys: list[str] = field(default_factory=list)

    def add(self, key: str, entry: AccountEntry) -> None:
        bucket = self.entries.get(key)
        if bucket is None:
            bucket = self.entries[key] = []
            self.keys.append(key)
        bucket.append(entry)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self.entries


class MatchType(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    FILTERED_EXACT = "filtered-exact"
    FILTERED_FUZZY = "filtered-fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class MatchResult:
    code: str
    matched_key: str = ""
    matched_classification: str = ""
    match_type: MatchType = MatchType.NONE

    @property
    def resolved(self) -> bool:
        return self.match_type is not MatchType.NONE


@dataclass(frozen=True)
class Transaction:
    """Lancamento canonico extraido de uma linha do arquivo de origem."""

    date: date
    description: str
    amount: Decimal
    ancillary_text: str = ""


class Operation(str, Enum):
    DEBIT = "D"
    CREDIT = "C"


@dataclass(frozen=True)
class OutputRow:
    """Uma linha do arquivo final de importacao contabil."""

    operation: Operation
    date: str
    account_code: str
    counterparty_description: str
    amount: str
    narrative: str

    def as_record(self) -> list[str]:
        return [
            self.operation.value,
            self.date,
            self.counterparty_description,
            self.account_code,
            self.amount,
            self.narrative,
        ]


__all__ = [
    "AccountEntry",
    "AccountIndex",
    "MatchType",
    "MatchResult",
    "Transaction",
    "Operation",
    "OutputRow",
]
