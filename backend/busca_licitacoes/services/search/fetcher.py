"""
PNCP Search Fetcher - paginated fan-out across modalidades.

Each modalidade is an independent query stream. Streams run one after the
other with a fixed pause in between; pages inside a stream are sequential
because the page count is only known after page 1. A failure abandons the
current modalidade only, and records already collected are kept.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ...core.datetime_utils import build_date_params
from ...core.errors import handle_api_error
from ...core.pncp_client import MAX_PAGE_SIZE, PNCPClient
from ...domains.pncp import ModalidadeContratacao
from ...domains.search import ApiResponse, FilterSet

logger = logging.getLogger(__name__)

DEADLINE_MESSAGE = "Tempo limite da busca excedido"


@dataclass
class ModalidadeFailure:
    """Falha que interrompeu a paginação de uma modalidade."""

    modalidade: ModalidadeContratacao
    pagina: int
    error: ApiResponse


@dataclass
class FetchReport:
    """Registros agregados de todas as modalidades, com diagnóstico."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    modalidade_stats: Dict[str, int] = field(default_factory=dict)
    failures: List[ModalidadeFailure] = field(default_factory=list)
    deadline_exceeded: bool = False

    @property
    def failed_modalidades(self) -> List[ModalidadeContratacao]:
        return [f.modalidade for f in self.failures]


class PNCPSearchFetcher:
    """
    Fetches every page of every requested modalidade from PNCP.

    Pure Python class with no framework dependencies.
    """

    def __init__(
        self,
        pncp_client: Optional[PNCPClient] = None,
        page_size: int = MAX_PAGE_SIZE,
        inter_modality_delay: float = 0.2,
        deadline_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            pncp_client: Optional pre-configured PNCP client
            page_size: Records per page requested from the API
            inter_modality_delay: Pause after each modalidade (seconds)
            deadline_seconds: Overall time budget for one fetch, None = unbounded
            clock: Monotonic time source
        """
        self.pncp_client = pncp_client or PNCPClient()
        self.page_size = page_size
        self.inter_modality_delay = inter_modality_delay
        self.deadline_seconds = deadline_seconds
        self.clock = clock

    def close(self):
        self.pncp_client.close()

    @staticmethod
    def build_query_params(filters: FilterSet) -> Dict[str, Any]:
        """
        Translate a filter set into PNCP client keyword arguments.

        Dates are clamped to the 365-day window and formatted YYYYMMDD.
        """
        dates = build_date_params(filters.dataInicial, filters.dataFinal)
        return {
            "data_inicial": dates.get("dataInicial"),
            "data_final": dates.get("dataFinal"),
            "uf": filters.estado,
            "valor_minimo": filters.valorMin,
            "valor_maximo": filters.valorMax,
        }

    def fetch(
        self,
        filters: FilterSet,
        modalidades: List[ModalidadeContratacao],
    ) -> FetchReport:
        """
        Fetch all pages for each modalidade, in order.

        Args:
            filters: Filter set (dates, UF and value bounds go upstream)
            modalidades: Modalidades to query

        Returns:
            FetchReport with every record collected, even when some
            modalidades failed
        """
        query = self.build_query_params(filters)
        report = FetchReport()
        started_at = self.clock()

        logger.info(
            f"Buscando PNCP: {len(modalidades)} modalidades, parâmetros {query}"
        )

        for idx, modalidade in enumerate(modalidades, 1):
            if self._deadline_exceeded(started_at):
                self._record_deadline(report, modalidade, pagina=1)
                continue

            logger.info(
                f"[{idx}/{len(modalidades)}] Buscando modalidade {modalidade.value} "
                f"({modalidade.nome})..."
            )

            records = self._fetch_modalidade(modalidade, query, report, started_at)
            report.records.extend(records)
            report.modalidade_stats[modalidade.nome] = len(records)

            if self.inter_modality_delay > 0:
                time.sleep(self.inter_modality_delay)

        logger.info(
            f"Busca na API PNCP concluída. Total de {len(report.records)} "
            f"licitações brutas, {len(report.failures)} modalidades com falha"
        )

        return report

    def _fetch_modalidade(
        self,
        modalidade: ModalidadeContratacao,
        query: Dict[str, Any],
        report: FetchReport,
        started_at: float,
    ) -> List[Dict[str, Any]]:
        collected: List[Dict[str, Any]] = []
        pagina = 1
        total_paginas = 1

        while pagina <= total_paginas:
            if pagina > 1 and self._deadline_exceeded(started_at):
                self._record_deadline(report, modalidade, pagina)
                break

            try:
                page = self.pncp_client.fetch_contratacoes_publicacao(
                    modalidade,
                    pagina=pagina,
                    tamanho_pagina=self.page_size,
                    **query,
                )
            except Exception as e:
                error = handle_api_error(
                    e,
                    f"Erro ao buscar modalidade {modalidade.value}, página {pagina}. "
                    "Pulando para a próxima.",
                )
                report.failures.append(ModalidadeFailure(modalidade, pagina, error))
                break

            if page is None:
                break

            collected.extend(page.data)

            if pagina == 1:
                if page.totalPaginas > 0:
                    total_paginas = page.totalPaginas
                    logger.info(
                        f"  -> Modalidade {modalidade.value}: {page.totalRegistros} "
                        f"registros encontrados em {total_paginas} páginas."
                    )
                else:
                    logger.info(
                        f"  -> Modalidade {modalidade.value}: Nenhum registro encontrado."
                    )
                    break

            pagina += 1

        return collected

    def _deadline_exceeded(self, started_at: float) -> bool:
        if self.deadline_seconds is None:
            return False
        return self.clock() - started_at >= self.deadline_seconds

    def _record_deadline(
        self, report: FetchReport, modalidade: ModalidadeContratacao, pagina: int
    ):
        if not report.deadline_exceeded:
            logger.warning(
                f"{DEADLINE_MESSAGE} ({self.deadline_seconds}s); "
                "retornando resultados parciais"
            )
        report.deadline_exceeded = True
        report.failures.append(
            ModalidadeFailure(
                modalidade, pagina, ApiResponse.failure(DEADLINE_MESSAGE, 504)
            )
        )
