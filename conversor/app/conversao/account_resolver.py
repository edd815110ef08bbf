"""
Busca de conta contabil a partir de texto livre (favorecido, banco, pagador).

Ordem: busca exata pela descricao normalizada e, se nao achar, busca
aproximada por n-gramas de caracteres. Quando ha filtro de classificacao a
busca nunca sai do escopo pedido: sem candidatos no escopo o resultado e
"nao encontrado", nunca uma conta de outro grupo.
"""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from conversor.app.config import FALLBACK_ACCOUNT

from .models import AccountEntry, AccountIndex, MatchResult, MatchType
from .normalizer import normalize_text, similarity

logger = logging.getLogger(__name__)

DEFAULT_NGRAM_SIZES = (3, 4, 5, 6)

PrefixKey = tuple[str, ...]


def ngram_bag(texto: str, sizes: Sequence[int]) -> Counter[str]:
    """Multiconjunto dos n-gramas sobrepostos de ``texto`` para cada tamanho."""
    bag: Counter[str] = Counter()
    for n in sizes:
        if len(texto) < n:
            continue
        for i in range(len(texto) - n + 1):
            bag[texto[i : i + n]] += 1
    if not bag and texto:
        bag[texto] += 1
    return bag


class NGramIndex:
    """Indice invertido n-grama -> chaves, pontuado por sobreposicao de multiconjuntos."""

    def __init__(self, keys: Iterable[str], sizes: Sequence[int] = DEFAULT_NGRAM_SIZES) -> None:
        self.keys: list[str] = list(keys)
        self.sizes = tuple(sizes)
        self._postings: dict[str, list[tuple[int, int]]] = defaultdict(list)
        for posicao, chave in enumerate(self.keys):
            for grama, quantidade in ngram_bag(chave, self.sizes).items():
                self._postings[grama].append((posicao, quantidade))

    def scores(self, consulta: str) -> dict[int, int]:
        pontos: dict[int, int] = defaultdict(int)
        for grama, quantidade in ngram_bag(consulta, self.sizes).items():
            for posicao, na_chave in self._postings.get(grama, ()):
                pontos[posicao] += min(quantidade, na_chave)
        return pontos

    def closest(self, consulta: str) -> str | None:
        """Chave mais proxima; empate decidido por similaridade e depois pela ordem original."""
        pontos = self.scores(consulta)
        if not pontos:
            return None
        melhor = max(pontos.values())
        empatados = sorted(posicao for posicao, valor in pontos.items() if valor == melhor)
        if len(empatados) > 1:
            escolhido = max(empatados, key=lambda posicao: similarity(consulta, self.keys[posicao]))
        else:
            escolhido = empatados[0]
        return self.keys[escolhido]


@dataclass
class _CandidateView:
    entries: dict[str, list[AccountEntry]]
    keys: list[str]
    sizes: tuple[int, ...]
    _ngrams: NGramIndex | None = field(default=None, repr=False)

    @property
    def ngrams(self) -> NGramIndex:
        if self._ngrams is None:
            self._ngrams = NGramIndex(self.keys, self.sizes)
        return self._ngrams


def most_specific(contas: Sequence[AccountEntry]) -> AccountEntry:
    """Conta com a classificacao mais longa; empate fica com a primeira do arquivo."""
    return max(contas, key=lambda conta: len(conta.classification))


def prefix_key(prefixos: Iterable[str] | None) -> PrefixKey:
    if not prefixos:
        return ()
    return tuple(sorted({p.strip() for p in prefixos if p and p.strip()}))


class AccountResolver:
    """Resolve descricoes em codigos de conta para uma unica conversao.

    Guarda em memoria os resultados por (descricao normalizada, prefixos) e os
    indices de n-gramas por conjunto de prefixos. Nao deve ser compartilhado
    entre conversoes.
    """

    def __init__(
        self,
        index: AccountIndex,
        fallback_code: str = FALLBACK_ACCOUNT,
        ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
    ) -> None:
        self.index = index
        self.fallback_code = fallback_code
        self.ngram_sizes = tuple(ngram_sizes)
        self._views: dict[PrefixKey, _CandidateView] = {}
        self._cache: dict[tuple[str, PrefixKey], MatchResult] = {}
        self._stats: Counter[MatchType] = Counter()

    def resolve(self, texto: str | None, classification_prefixes: Iterable[str] | None = None) -> MatchResult:
        chave = normalize_text(texto)
        prefixos = prefix_key(classification_prefixes)
        memo = (chave, prefixos)
        resultado = self._cache.get(memo)
        if resultado is None:
            resultado = self._cache[memo] = self._resolve_uncached(chave, prefixos)
        self._stats[resultado.match_type] += 1
        return resultado

    def resolve_code(self, texto: str | None, classification_prefixes: Iterable[str] | None = None) -> str:
        return self.resolve(texto, classification_prefixes).code

    def stats(self) -> dict[str, int]:
        return {tipo.value: self._stats.get(tipo, 0) for tipo in MatchType}

    @property
    def unresolved_count(self) -> int:
        return self._stats.get(MatchType.NONE, 0)

    def _resolve_uncached(self, chave: str, prefixos: PrefixKey) -> MatchResult:
        if not chave:
            return self._unresolved()
        view = self._view(prefixos)
        if not view.keys:
            logger.debug(f"Nenhuma conta com classificação {prefixos}; '{chave}' fica sem conta")
            return self._unresolved()

        filtrado = bool(prefixos)
        contas = view.entries.get(chave)
        if contas:
            conta = most_specific(contas)
            tipo = MatchType.FILTERED_EXACT if filtrado else MatchType.EXACT
            return MatchResult(conta.code, chave, conta.classification, tipo)

        aproximada = view.ngrams.closest(chave)
        if aproximada is not None:
            conta = most_specific(view.entries[aproximada])
            tipo = MatchType.FILTERED_FUZZY if filtrado else MatchType.FUZZY
            logger.debug(f"'{chave}' ~ '{aproximada}' -> {conta.code}")
            return MatchResult(conta.code, aproximada, conta.classification, tipo)

        return self._unresolved()

    def _unresolved(self) -> MatchResult:
        return MatchResult(code=self.fallback_code)

    def _view(self, prefixos: PrefixKey) -> _CandidateView:
        view = self._views.get(prefixos)
        if view is not None:
            return view
        if not prefixos:
            view = _CandidateView(self.index.entries, self.index.keys, self.ngram_sizes)
        else:
            entradas: dict[str, list[AccountEntry]] = {}
            for chave in self.index.keys:
                mantidas = [
                    conta
                    for conta in self.index.entries[chave]
                    if any(conta.classification.startswith(prefixo) for prefixo in prefixos)
                ]
                if mantidas:
                    entradas[chave] = mantidas
            view = _CandidateView(entradas, list(entradas), self.ngram_sizes)
        self._views[prefixos] = view
        return view


__all__ = ["AccountResolver", "NGramIndex", "ngram_bag", "most_specific", "prefix_key", "DEFAULT_NGRAM_SIZES"]
