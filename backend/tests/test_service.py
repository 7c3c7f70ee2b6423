"""
End-to-end tests for the PNCP search service against a stub upstream.
"""

from datetime import date

from conftest import FakePNCPClient, page_of, transport_error

from busca_licitacoes.domains.pncp import ModalidadeContratacao
from busca_licitacoes.domains.search import FilterSet
from busca_licitacoes.services.search import PNCPSearchService
from busca_licitacoes.services.search.service import GENERAL_ERROR_MESSAGE


def test_limpeza_in_sp_returns_the_single_match(make_service):
    limpeza = {
        "numeroControlePNCP": "1",
        "objetoCompra": "Serviço de limpeza urbana",
        "valorTotalEstimado": 60000,
    }
    pncp = FakePNCPClient({(6, 1): page_of([limpeza])})
    filters = FilterSet.model_validate(
        {
            "palavrasChave": ["limpeza"],
            "valorMin": 50000,
            "valorMax": None,
            "estado": "SP",
            "modalidades": [],
            "dataInicial": "2024-01-01",
            "dataFinal": "2024-01-31",
        }
    )

    result = make_service(pncp).buscar_licitacoes(filters)

    assert result.success is True
    assert result.status == 200
    assert result.data.data == [limpeza]
    assert result.data.totalRegistros == 1
    assert result.data.totalPaginas == 1
    assert result.data.numeroPagina == 1
    assert result.data.paginasRestantes == 0
    assert result.data.empty is False
    assert pncp.codes_called() == list(range(1, 14))
    _, _, kwargs = pncp.calls[0]
    assert kwargs["uf"] == "SP"
    assert kwargs["data_inicial"] == "20240101"
    assert kwargs["data_final"] == "20240131"


def test_failed_modalidade_still_reports_success(make_service):
    pages = {
        (m.value, 1): page_of(
            [{"numeroControlePNCP": str(m.value), "objetoCompra": "limpeza predial"}]
        )
        for m in ModalidadeContratacao
    }
    pages[(3, 1)] = transport_error()
    pncp = FakePNCPClient(pages)

    service = make_service(pncp)
    result, report = service.run(FilterSet(palavrasChave=["limpeza"]))

    assert result.success is True
    codes = [int(r["numeroControlePNCP"]) for r in result.data.data]
    assert 3 not in codes
    assert codes == [c for c in range(1, 14) if c != 3]
    assert report.failed_modalidades == [ModalidadeContratacao.CONCURSO]


def test_only_requested_modalidades_are_queried(make_service):
    pncp = FakePNCPClient()
    filters = FilterSet(modalidades=["pregão eletrônico", "leilão eletrônico", "xyz"])

    make_service(pncp).buscar_licitacoes(filters)

    assert pncp.codes_called() == [6, 1]


def test_unrecognized_modalidades_query_nothing(make_service):
    pncp = FakePNCPClient()

    result = make_service(pncp).buscar_licitacoes(FilterSet(modalidades=["xyz"]))

    assert pncp.calls == []
    assert result.success is True
    assert result.data.empty is True
    assert result.data.data == []


def test_blacklist_and_value_range_applied_together(make_service):
    records = [
        {"objetoCompra": "Limpeza de vias", "valorTotalEstimado": 80000},
        {"objetoCompra": "Limpeza hospitalar", "valorTotalEstimado": 80000},
        {"objetoCompra": "Limpeza de praças", "valorTotalEstimado": 1000},
    ]
    pncp = FakePNCPClient({(6, 1): page_of(records)})
    filters = FilterSet(
        palavrasChave=["limpeza"],
        blacklist=["hospitalar"],
        valorMin=50000,
        dataInicial=date(2024, 1, 1),
        dataFinal=date(2024, 1, 31),
    )

    result = make_service(pncp).buscar_licitacoes(filters)

    assert result.data.data == [records[0]]


class ExplodingFetcher:
    def fetch(self, filters, modalidades):
        raise RuntimeError("falha inesperada")


def test_unexpected_error_becomes_500_envelope():
    service = PNCPSearchService(fetcher=ExplodingFetcher())

    result = service.buscar_licitacoes(FilterSet())

    assert result.success is False
    assert result.status == 500
    assert result.error == "falha inesperada"
    assert result.data is None


def test_unexpected_error_without_message_uses_general_message():
    class SilentFetcher:
        def fetch(self, filters, modalidades):
            raise RuntimeError()

    result = PNCPSearchService(fetcher=SilentFetcher()).buscar_licitacoes(FilterSet())

    assert result.error == GENERAL_ERROR_MESSAGE


def test_synonym_only_match_is_dropped_when_keywords_are_given(make_service):
    higienizacao = {"objetoCompra": "Serviço de higienização predial"}
    limpeza = {"objetoCompra": "Limpeza e higienização predial"}
    pncp = FakePNCPClient({(6, 1): page_of([higienizacao, limpeza])})
    filters = FilterSet(palavrasChave=["limpeza"], sinonimos=[["higienização"]])

    result = make_service(pncp).buscar_licitacoes(filters)

    assert result.data.data == [limpeza]


def test_close_releases_pncp_client(make_service):
    pncp = FakePNCPClient()
    make_service(pncp).close()
    assert pncp.closed is True
