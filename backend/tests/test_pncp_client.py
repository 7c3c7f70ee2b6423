"""
Tests for the PNCP HTTP client.
"""

import json
import time
from unittest.mock import Mock

import pytest
import requests

from busca_licitacoes.core.pncp_client import PNCPClient
from busca_licitacoes.domains.pncp import ModalidadeContratacao

URL = "https://pncp.test/api/consulta/v1/contratacoes/publicacao"


def make_response(status=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status
    response.url = URL
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    return response


def make_client(*responses, **kwargs):
    session = requests.Session()
    session.request = Mock(side_effect=list(responses))
    client = PNCPClient(
        base_url_query="https://pncp.test/api/consulta/", session=session, **kwargs
    )
    return client, session.request


PAGE = {
    "data": [{"numeroControlePNCP": "1", "objetoCompra": "Limpeza"}],
    "totalRegistros": 120,
    "totalPaginas": 3,
    "numeroPagina": 1,
    "paginasRestantes": 2,
    "empty": False,
}


def test_builds_query_params():
    client, request = make_client(make_response(body=PAGE))

    client.fetch_contratacoes_publicacao(
        ModalidadeContratacao.PREGAO_ELETRONICO,
        pagina=2,
        data_inicial="20240101",
        data_final="20240131",
        uf="SP",
        valor_minimo=50000,
    )

    method, url = request.call_args.args
    assert method == "GET"
    assert url == URL
    assert request.call_args.kwargs["params"] == {
        "tamanhoPagina": 50,
        "pagina": 2,
        "codigoModalidadeContratacao": 6,
        "dataInicial": "20240101",
        "dataFinal": "20240131",
        "uf": "SP",
        "valorMinimo": 50000,
    }
    assert request.call_args.kwargs["timeout"] == 60.0


def test_page_size_is_capped_at_50():
    client, request = make_client(make_response(body=PAGE))
    client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO, tamanho_pagina=500)
    assert request.call_args.kwargs["params"]["tamanhoPagina"] == 50


def test_parses_page_response():
    client, _ = make_client(make_response(body=PAGE))

    page = client.fetch_contratacoes_publicacao(ModalidadeContratacao.PREGAO_ELETRONICO)

    assert page.data == PAGE["data"]
    assert page.totalPaginas == 3
    assert page.totalRegistros == 120
    assert page.paginasRestantes == 2
    assert page.empty is False


def test_null_pagination_fields_default():
    client, _ = make_client(make_response(body={"data": [], "totalPaginas": None}))
    page = client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)
    assert page.totalPaginas == 0


@pytest.mark.parametrize(
    "response",
    [
        make_response(raw=b""),
        make_response(raw=b"   "),
        make_response(raw=b"<html>"),
        make_response(body={"totalPaginas": 1}),
        make_response(body={"data": "nope"}),
        make_response(body=[1, 2, 3]),
        make_response(body={"data": ["x"], "totalPaginas": 1}),
        make_response(body={"data": [], "totalPaginas": "muitas"}),
    ],
)
def test_malformed_responses_return_none(response):
    client, _ = make_client(response)
    assert client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO) is None


def test_http_error_is_raised_without_retry_by_default():
    client, request = make_client(make_response(status=503), make_response(body=PAGE))

    with pytest.raises(requests.HTTPError):
        client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)

    assert request.call_count == 1


def test_transport_error_is_raised():
    client, _ = make_client(requests.ConnectionError("refused"))
    with pytest.raises(requests.ConnectionError):
        client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)


def test_retries_server_errors_when_enabled(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda seconds: None)
    client, request = make_client(
        make_response(status=503),
        make_response(status=429),
        make_response(body=PAGE),
        max_attempts=3,
    )

    page = client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)

    assert page.totalPaginas == 3
    assert request.call_count == 3


def test_does_not_retry_client_errors(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda seconds: None)
    client, request = make_client(
        make_response(status=404), make_response(body=PAGE), max_attempts=3
    )

    with pytest.raises(requests.HTTPError) as exc_info:
        client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)

    assert exc_info.value.response.status_code == 404
    assert request.call_count == 1


def test_sends_accept_header():
    client, _ = make_client()
    assert client.session.headers["Accept"] == "*/*"


def test_rate_limit_spaces_requests(monkeypatch):
    sleeps = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    client, _ = make_client(
        make_response(body=PAGE), make_response(body=PAGE), rate_limit_delay=5.0
    )

    client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)
    client.fetch_contratacoes_publicacao(ModalidadeContratacao.CONCURSO)

    assert len(sleeps) == 1
    assert 0 < sleeps[0] <= 5.0
