"""
Pytest configuration and fixtures for Busca Licitações backend tests.
"""

import pytest
import requests
from fastapi.testclient import TestClient

from busca_licitacoes.api.licitacoes import (
    get_filter_extractor,
    get_rate_limiter,
    get_search_service,
)
from busca_licitacoes.core.rate_limiter import RequestRateLimiter
from busca_licitacoes.domains.search import PageResponse
from busca_licitacoes.main import app
from busca_licitacoes.services.search import PNCPSearchFetcher, PNCPSearchService


class FakePNCPClient:
    """
    In-memory stand-in for PNCPClient.

    `pages` maps (modalidade code, page number) to a PageResponse, an
    exception to raise, or None (malformed response). Missing keys answer
    with an empty page (totalPaginas 0).
    """

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []
        self.closed = False

    def fetch_contratacoes_publicacao(self, modalidade, pagina=1, **kwargs):
        code = int(modalidade)
        self.calls.append((code, pagina, kwargs))
        result = self.pages.get((code, pagina), PageResponse())
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True

    def codes_called(self):
        return [code for code, _, _ in self.calls]


class StubExtractor:
    """Returns fixed filters, or raises when given an exception."""

    def __init__(self, result):
        self.result = result
        self.questions = []

    def extract(self, question):
        self.questions.append(question)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def page_of(records, total_paginas=1, numero_pagina=1):
    """Build a PageResponse for tests."""
    return PageResponse(
        data=records,
        totalRegistros=len(records) * total_paginas,
        totalPaginas=total_paginas,
        numeroPagina=numero_pagina,
        paginasRestantes=total_paginas - numero_pagina,
        empty=not records,
    )


def transport_error(message="Connection refused"):
    return requests.ConnectionError(message)


@pytest.fixture
def sample_licitacao():
    """Sample PNCP record for testing."""
    return {
        "numeroControlePNCP": "46395000000139-1-000123/2024",
        "objetoCompra": "Serviço de limpeza urbana",
        "valorTotalEstimado": 60000.0,
        "valorTotalHomologado": None,
        "dataPublicacaoPncp": "2024-01-15T10:00:00",
        "situacaoCompraNome": "Divulgada no PNCP",
        "orgaoEntidade": {
            "cnpj": "46395000000139",
            "razaoSocial": "MUNICIPIO DE SAO PAULO",
        },
        "unidadeOrgao": {
            "nomeUnidade": "Secretaria de Serviços",
            "municipioNome": "São Paulo",
            "ufSigla": "SP",
        },
    }


@pytest.fixture
def make_service():
    """Factory: search service on top of a FakePNCPClient, no delays."""

    def _make(pncp_client, **fetcher_kwargs):
        fetcher_kwargs.setdefault("inter_modality_delay", 0)
        fetcher = PNCPSearchFetcher(pncp_client=pncp_client, **fetcher_kwargs)
        return PNCPSearchService(fetcher=fetcher)

    return _make


@pytest.fixture
def rate_limiter():
    return RequestRateLimiter(max_requests=20, window_seconds=60)


@pytest.fixture
def client(rate_limiter):
    """
    FastAPI test client fixture, with the rate limiter isolated per test.

    Usage:
        def test_something(client):
            response = client.get("/endpoint")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def override_pipeline():
    """Install a stub extractor and a search service into the app."""

    def _override(filters, service):
        extractor = filters if isinstance(filters, StubExtractor) else StubExtractor(filters)
        app.dependency_overrides[get_filter_extractor] = lambda: extractor
        app.dependency_overrides[get_search_service] = lambda: service
        return extractor

    return _override
