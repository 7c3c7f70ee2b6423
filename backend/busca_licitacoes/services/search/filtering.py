"""
Local relevance filter for PNCP records.

Applies, against the lower-cased `objetoCompra` of each record:
1. inclusion by keywords and synonyms (any term as substring; no terms = all pass)
2. exclusion by blacklist (any term as substring)
3. value range on max(valorTotalEstimado, valorTotalHomologado), bounds inclusive

The filter is a stable selection: records come back in the original order,
as the same objects, without any change.
"""

import logging
from typing import Any, Iterable, Optional

from ...domains.search import FilterSet

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _objeto(record: Record) -> str:
    return (record.get("objetoCompra") or "").lower()


def comparison_value(record: Record) -> float:
    """Largest of estimated and homologated value, missing values as 0."""
    estimado = record.get("valorTotalEstimado") or 0
    homologado = record.get("valorTotalHomologado") or 0
    return max(estimado, homologado)


def matches_terms(objeto: str, terms: list[str]) -> bool:
    """True when there are no terms or any term occurs in `objeto`."""
    return not terms or any(term in objeto for term in terms)


def is_blacklisted(objeto: str, blacklist: list[str]) -> bool:
    """True when any blacklist term occurs in `objeto`."""
    return bool(blacklist) and any(term in objeto for term in blacklist)


def within_value_range(
    value: float, valor_min: Optional[float], valor_max: Optional[float]
) -> bool:
    if valor_min is not None and value < valor_min:
        return False
    if valor_max is not None and value > valor_max:
        return False
    return True


def filter_licitacoes(records: Iterable[Record], filters: FilterSet) -> list[Record]:
    """
    Keep the records matching the text and value predicates of `filters`.

    Args:
        records: Raw PNCP records (aggregated across modalidades)
        filters: Filter set with keywords, synonyms, blacklist and value bounds

    Returns:
        Filtered list, same order and same objects as the input

    Example:
        >>> filters = FilterSet(palavrasChave=["limpeza"], blacklist=["hospitalar"])
        >>> filter_licitacoes(
        ...     [
        ...         {"objetoCompra": "Serviço de limpeza urbana"},
        ...         {"objetoCompra": "Limpeza hospitalar"},
        ...     ],
        ...     filters,
        ... )
        [{'objetoCompra': 'Serviço de limpeza urbana'}]
    """
    terms = filters.search_terms
    blacklist = [b.lower() for b in filters.blacklist if b]

    selected = []
    for record in records:
        objeto = _objeto(record)
        if not matches_terms(objeto, terms):
            continue
        if is_blacklisted(objeto, blacklist):
            continue
        if not within_value_range(
            comparison_value(record), filters.valorMin, filters.valorMax
        ):
            continue
        selected.append(record)

    logger.debug(f"Filtro local manteve {len(selected)} registros")
    return selected
