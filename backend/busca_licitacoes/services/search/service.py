"""
PNCP Search Service - Framework-agnostic business logic.

Resolves modalidades, fetches every page of each one from PNCP, applies the
local relevance filter in two passes (keywords and blacklist, then the full
filter set with synonyms and value range) and wraps the result in an
ApiResponse envelope.
No web framework dependencies - pure Python business logic.
"""

import logging
from typing import Optional, Tuple

from ...core.errors import handle_api_error
from ...core.pncp_client import PNCPClient
from ...domains.pncp import resolve_modalidades
from ...domains.search import ApiResponse, FilterSet, PageResponse
from .fetcher import FetchReport, PNCPSearchFetcher
from .filtering import filter_licitacoes

logger = logging.getLogger(__name__)

GENERAL_ERROR_MESSAGE = "Erro geral ao buscar licitações na API PNCP"


class PNCPSearchService:
    """
    Service for searching procurement records on PNCP.

    Pure Python class with no framework dependencies.
    Can be used standalone or wrapped by the HTTP API.
    """

    def __init__(self, fetcher: Optional[PNCPSearchFetcher] = None):
        """
        Initialize PNCP search service.

        Args:
            fetcher: Optional pre-configured fetcher
        """
        self.fetcher = fetcher or PNCPSearchFetcher()

    @classmethod
    def from_settings(cls, settings) -> "PNCPSearchService":
        """Build the service and its collaborators from application settings."""
        fetcher = PNCPSearchFetcher(
            pncp_client=PNCPClient.from_settings(settings),
            page_size=settings.PNCP_PAGE_SIZE,
            inter_modality_delay=settings.PNCP_INTER_MODALITY_DELAY,
            deadline_seconds=settings.SEARCH_DEADLINE_SECONDS,
        )
        return cls(fetcher=fetcher)

    def run(self, filters: FilterSet) -> Tuple[ApiResponse, Optional[FetchReport]]:
        """
        Run the search and return the envelope plus fetch diagnostics.

        Args:
            filters: Structured search filters

        Returns:
            Tuple (envelope, report). The report is None when the pipeline
            failed before fetching finished.
        """
        report = None
        try:
            logger.info(f"Buscando licitações com filtros: {filters.model_dump()}")

            modalidades = resolve_modalidades(filters.modalidades)
            if filters.modalidades and not modalidades:
                logger.warning(
                    f"Nenhuma modalidade reconhecida em {filters.modalidades}; "
                    "nenhuma consulta será feita"
                )

            report = self.fetcher.fetch(filters, modalidades)

            # Fetch-layer pass: keywords and blacklist only
            relevantes = filter_licitacoes(
                report.records,
                FilterSet(
                    palavrasChave=filters.palavrasChave, blacklist=filters.blacklist
                ),
            )
            logger.info(
                f"Filtro por palavras-chave e blacklist: {len(relevantes)} de "
                f"{len(report.records)} licitações"
            )

            resultados = filter_licitacoes(relevantes, filters)

            logger.info(
                f"Após filtragem por sinônimos e valor, "
                f"restaram {len(resultados)} licitações."
            )

            return ApiResponse.ok(PageResponse.single_page(resultados)), report

        except Exception as e:
            logger.error(f"{GENERAL_ERROR_MESSAGE}: {e}", exc_info=True)
            return handle_api_error(e, GENERAL_ERROR_MESSAGE), report

    def buscar_licitacoes(self, filters: FilterSet) -> ApiResponse:
        """
        Search PNCP and return the filtered records.

        Args:
            filters: Structured search filters

        Returns:
            ApiResponse: success with a single page holding every match, or
            a classified error envelope

        Example:
            >>> service = PNCPSearchService()
            >>> result = service.buscar_licitacoes(
            ...     FilterSet(palavrasChave=["limpeza"], estado="SP")
            ... )
            >>> result.data.totalRegistros
        """
        envelope, _ = self.run(filters)
        return envelope

    def close(self):
        """Release the HTTP session held by the fetcher's PNCP client."""
        self.fetcher.close()
