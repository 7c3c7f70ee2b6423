"""
Search Domain: page response and result envelope.

PageResponse mirrors one page of the PNCP consultation API. ApiResponse is the
uniform result-or-error envelope returned by the search pipeline.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PageResponse(BaseModel):
    """Uma página da API de consulta do PNCP."""

    model_config = ConfigDict(extra="ignore")

    data: list[dict[str, Any]] = Field(default_factory=list)
    totalRegistros: int = 0
    totalPaginas: int = 0
    numeroPagina: int = 1
    paginasRestantes: int = 0
    empty: bool = True

    @classmethod
    def single_page(cls, records: list[dict[str, Any]]) -> "PageResponse":
        """Wrap an already aggregated list as one page."""
        return cls(
            data=records,
            totalRegistros=len(records),
            totalPaginas=1,
            numeroPagina=1,
            paginasRestantes=0,
            empty=len(records) == 0,
        )


class ApiResponse(BaseModel):
    """
    Envelope de resultado: sucesso com dados, ou erro com status.

    Example:
        >>> ApiResponse.failure("Recurso não encontrado", 404).model_dump(exclude_none=True)
        {'success': False, 'error': 'Recurso não encontrado', 'status': 404}
    """

    success: bool
    data: Optional[PageResponse] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @classmethod
    def ok(cls, page: PageResponse) -> "ApiResponse":
        return cls(success=True, data=page, status=200)

    @classmethod
    def failure(cls, error: str, status: int = 500) -> "ApiResponse":
        return cls(success=False, error=error, status=status)
