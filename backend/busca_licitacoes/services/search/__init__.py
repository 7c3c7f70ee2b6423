"""Search services: paginated PNCP fetch, local filter and orchestration."""

from .fetcher import FetchReport, ModalidadeFailure, PNCPSearchFetcher
from .filtering import filter_licitacoes
from .service import PNCPSearchService

__all__ = [
    "FetchReport",
    "ModalidadeFailure",
    "PNCPSearchFetcher",
    "PNCPSearchService",
    "filter_licitacoes",
]
