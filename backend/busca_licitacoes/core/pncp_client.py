"""Cliente para PNCP API com retry opcional e rate limiting"""

import logging
import time
from typing import Optional

import requests
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..domains.pncp import ModalidadeContratacao
from ..domains.search import PageResponse

logger = logging.getLogger(__name__)

# Largest page accepted by /v1/contratacoes/publicacao
MAX_PAGE_SIZE = 50


def _is_retryable(error: BaseException) -> bool:
    """Retry only on upstream throttling and server errors."""
    if not isinstance(error, requests.HTTPError) or error.response is None:
        return False
    status = error.response.status_code
    return status == 429 or status >= 500


class PNCPClient:
    """Cliente para consultar contratações publicadas no PNCP"""

    BASE_URL_QUERY = "https://pncp.gov.br/api/consulta"

    def __init__(
        self,
        base_url_query: Optional[str] = None,
        timeout: float = 60.0,
        rate_limit_delay: float = 0.0,
        max_attempts: int = 1,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url_query: Endpoint de consulta (ex: https://pncp.gov.br/api/consulta)
            timeout: Timeout por request (segundos)
            rate_limit_delay: Intervalo mínimo entre requests (segundos)
            max_attempts: Tentativas por request (1 = sem retry)
            session: Sessão HTTP pré-configurada (útil em testes)
        """
        self.base_url_query = (
            base_url_query.rstrip("/") if base_url_query else self.BASE_URL_QUERY
        )
        self.timeout = timeout
        self.rate_limit_delay = rate_limit_delay
        self.max_attempts = max(1, max_attempts)
        self.last_request_time = 0.0

        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "*/*"})

    @classmethod
    def from_settings(cls, settings) -> "PNCPClient":
        """Build a client from application settings."""
        return cls(
            base_url_query=settings.PNCP_CONSULTA_API_URL,
            timeout=settings.PNCP_TIMEOUT,
            rate_limit_delay=settings.PNCP_RATE_LIMIT_DELAY,
            max_attempts=settings.PNCP_MAX_ATTEMPTS,
        )

    def close(self):
        """Fecha a sessão HTTP"""
        self.session.close()

    def _rate_limit(self):
        """Implementa rate limiting respeitoso"""
        current_time = time.time()
        time_since_last = current_time - self.last_request_time

        if time_since_last < self.rate_limit_delay:
            sleep_time = self.rate_limit_delay - time_since_last
            time.sleep(sleep_time)

        self.last_request_time = time.time()

    def _make_request(
        self, url: str, method: str = "GET", **kwargs
    ) -> requests.Response:
        """Faz request, repetindo em 429/5xx quando max_attempts > 1"""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )

        for attempt in retrying:
            with attempt:
                self._rate_limit()

                logger.info(f"{method} {url} {kwargs.get('params', {})}")

                response = self.session.request(
                    method, url, timeout=self.timeout, **kwargs
                )
                response.raise_for_status()

        return response

    def fetch_contratacoes_publicacao(
        self,
        modalidade: ModalidadeContratacao,
        pagina: int = 1,
        tamanho_pagina: int = MAX_PAGE_SIZE,
        data_inicial: Optional[str] = None,
        data_final: Optional[str] = None,
        uf: Optional[str] = None,
        valor_minimo: Optional[float] = None,
        valor_maximo: Optional[float] = None,
    ) -> Optional[PageResponse]:
        """
        Busca uma página de contratações por data de publicação.

        Args:
            modalidade: Modalidade de contratação consultada
            pagina: Número da página (1-based)
            tamanho_pagina: Registros por página (max 50)
            data_inicial: YYYYMMDD
            data_final: YYYYMMDD
            uf: Sigla do estado (ex: "SP")
            valor_minimo: Valor mínimo da contratação
            valor_maximo: Valor máximo da contratação

        Returns:
            PageResponse, ou None quando a resposta não traz uma lista em 'data'
            (vazia, JSON inválido ou formato inesperado)

        Raises:
            requests.RequestException: falha de transporte ou status não-2xx

        Example:
            >>> client.fetch_contratacoes_publicacao(
            ...     ModalidadeContratacao.PREGAO_ELETRONICO,
            ...     data_inicial="20240101",
            ...     data_final="20240131",
            ...     uf="SP",
            ... )
        """
        url = f"{self.base_url_query}/v1/contratacoes/publicacao"

        params = {
            "tamanhoPagina": min(tamanho_pagina, MAX_PAGE_SIZE),
            "pagina": pagina,
            "codigoModalidadeContratacao": int(modalidade),
        }
        if data_inicial:
            params["dataInicial"] = data_inicial
        if data_final:
            params["dataFinal"] = data_final
        if uf:
            params["uf"] = uf
        if valor_minimo:
            params["valorMinimo"] = valor_minimo
        if valor_maximo:
            params["valorMaximo"] = valor_maximo

        response = self._make_request(url, params=params)

        # Handle empty responses (common for future dates or rare modalidades)
        if not response.content or response.content.strip() == b"":
            logger.warning(
                f"Empty response from PNCP API for modalidade {int(modalidade)}, página {pagina}"
            )
            return None

        try:
            result = response.json()
        except ValueError as e:
            # JSONDecodeError inherits from ValueError
            logger.warning(f"Invalid JSON response from PNCP API: {e}")
            return None

        if not isinstance(result, dict) or not isinstance(result.get("data"), list):
            logger.warning(
                f"Unexpected PNCP response for modalidade {int(modalidade)}, "
                f"página {pagina}: 'data' ausente ou não é lista"
            )
            return None

        # Nulls in pagination fields are treated as absent
        page_fields = {k: v for k, v in result.items() if v is not None}
        try:
            return PageResponse.model_validate(page_fields)
        except ValidationError as e:
            logger.warning(
                f"Malformed PNCP page for modalidade {int(modalidade)}, "
                f"página {pagina}: {e}"
            )
            return None
