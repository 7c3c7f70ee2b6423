"""
Business logic services for Busca Licitações.

These services are framework-agnostic and can be used independently
or wrapped by the HTTP API.

Organization:
- search/: PNCP search pipeline
  - fetcher.py: paginated fetch across modalidades
  - filtering.py: keyword, blacklist and value-range filter
  - service.py: orchestration and result envelope
- extraction/: free-text question -> structured filters

Example standalone usage:
    >>> from busca_licitacoes.services import PNCPSearchService
    >>> from busca_licitacoes.domains.search import FilterSet
    >>>
    >>> service = PNCPSearchService()
    >>> result = service.buscar_licitacoes(
    ...     FilterSet(
    ...         palavrasChave=["limpeza"],
    ...         estado="SP",
    ...         dataInicial="2024-01-01",
    ...         dataFinal="2024-01-31",
    ...     )
    ... )
    >>> len(result.data.data)
"""

from .extraction import OpenAIFilterExtractor
from .search import PNCPSearchService

__all__ = [
    "OpenAIFilterExtractor",
    "PNCPSearchService",
]
