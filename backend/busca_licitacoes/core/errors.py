"""
Error classification for external calls.

Every failure talking to an external API is turned into an ApiResponse
envelope ({success: False, error, status}). Classification never raises,
so it can run inside a fetch loop without unwinding it.
"""

import json
import logging
from typing import Optional

import requests

from ..domains.search import ApiResponse

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Recurso não encontrado na API. Verifique o endpoint ou parâmetros."
RATE_LIMITED_MESSAGE = "Limite de requisições excedido na API. Tente novamente mais tarde."


class BuscaLicitacoesError(Exception):
    """Base exception for the search application."""


class FilterExtractionError(BuscaLicitacoesError):
    """The extraction service could not turn a question into filters."""


def _response_body(response: requests.Response) -> Optional[object]:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _upstream_message(body: Optional[object]) -> Optional[str]:
    """Return the upstream 'error' or 'message' field when it is a string."""
    if not isinstance(body, dict):
        return None
    message = body.get("error") or body.get("message")
    return message if isinstance(message, str) else None


def handle_api_error(error: BaseException, default_message: str) -> ApiResponse:
    """
    Normalize an exception from an external call into an error envelope.

    Rules:
    - requests exception with HTTP response: status from the response;
      404 and 429 get fixed messages, other statuses use the upstream
      'error'/'message' field, else the exception text, else the default
    - requests exception without response (timeout, DNS): status 500
    - any other exception: status 500 with its message

    Args:
        error: Exception raised by the external call
        default_message: Context message (also logged)

    Returns:
        ApiResponse with success=False

    Example:
        >>> handle_api_error(requests.Timeout("read timed out"), "Erro na busca")
        ApiResponse(success=False, data=None, error='read timed out', status=500)
    """
    message = default_message
    status = 500

    try:
        if isinstance(error, requests.RequestException):
            response = error.response
            if response is not None:
                status = response.status_code or 500
                body = _response_body(response)
                message = _upstream_message(body) or str(error) or default_message

                logger.error(f"{default_message} (Status: {status})")
                if body:
                    rendered = (
                        json.dumps(body, indent=2, ensure_ascii=False)
                        if isinstance(body, (dict, list))
                        else body
                    )
                    logger.error(f"Resposta da API: {rendered}")
            else:
                message = str(error) or default_message
                request_url = error.request.url if error.request is not None else None
                logger.error(f"{default_message} (Status: {status}) {request_url}: {error}")

            if status == 404:
                message = NOT_FOUND_MESSAGE
            elif status == 429:
                message = RATE_LIMITED_MESSAGE
        else:
            message = str(error) or default_message
            logger.error(f"{default_message} (erro inesperado): {error!r}")
    except Exception as e:
        # Malformed exception objects must not escape the classifier
        logger.error(f"Falha ao classificar erro: {e!r}")

    return ApiResponse.failure(message, status)
