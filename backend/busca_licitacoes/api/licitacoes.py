"""
HTTP boundary for procurement search.

POST /api/buscar-licitacoes takes {"question": "..."}, extracts structured
filters, runs the PNCP search pipeline and returns {"resultados": [...]}.
"""

import logging
from functools import lru_cache
from typing import Iterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..core.config import settings
from ..core.rate_limiter import RequestRateLimiter
from ..services.extraction import FilterExtractor, OpenAIFilterExtractor
from ..services.search import PNCPSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["licitacoes"])

_rate_limiter = RequestRateLimiter.from_settings(settings)


def get_search_service() -> Iterator[PNCPSearchService]:
    """One service, and one PNCP session, per request."""
    service = PNCPSearchService.from_settings(settings)
    try:
        yield service
    finally:
        service.close()


@lru_cache
def get_filter_extractor() -> FilterExtractor:
    return OpenAIFilterExtractor.from_settings(settings)


def get_rate_limiter() -> RequestRateLimiter:
    return _rate_limiter


def get_client_id(request: Request) -> str:
    """First X-Forwarded-For entry, else the peer address, else 'unknown'."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@router.post("/buscar-licitacoes")
async def buscar_licitacoes(
    request: Request,
    service: PNCPSearchService = Depends(get_search_service),
    extractor: FilterExtractor = Depends(get_filter_extractor),
    limiter: RequestRateLimiter = Depends(get_rate_limiter),
):
    if not limiter.allow(get_client_id(request)):
        return JSONResponse({"error": "Limite de requisições excedido"}, status_code=429)

    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "Corpo da requisição inválido"}, status_code=400)

    question = body.get("question") if isinstance(body, dict) else None
    if not isinstance(question, str) or not question.strip():
        return JSONResponse({"error": "Pergunta ausente"}, status_code=400)

    try:
        filters = await run_in_threadpool(extractor.extract, question)
        logger.info(f"Filtros extraídos: {filters.model_dump()}")

        result = await run_in_threadpool(service.buscar_licitacoes, filters)

        if not result.success or result.data is None:
            logger.error(f"Erro na resposta da API PNCP: {result.error}")
            return JSONResponse(
                {
                    "error": result.error
                    or "Não foi possível obter licitações da API PNCP."
                },
                status_code=result.status or 500,
            )

        resultados = result.data.data
        logger.info(
            f"Requisição processada. Enviando {len(resultados)} licitações filtradas."
        )
        return JSONResponse({"resultados": resultados}, status_code=200)

    except Exception as e:
        logger.error(
            f"Erro crítico ao processar requisição em /api/buscar-licitacoes: {e}",
            exc_info=True,
        )
        return JSONResponse(
            {"error": "Erro interno do servidor", "message": str(e)}, status_code=500
        )


@router.get("/buscar-licitacoes")
async def buscar_licitacoes_get():
    return JSONResponse(
        {"message": "Método GET não suportado para esta rota. Use POST."},
        status_code=405,
    )
