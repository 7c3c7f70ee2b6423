"""
Calendar date utilities for PNCP query parameters.

The PNCP consultation API takes dates as YYYYMMDD strings and rejects
publication windows longer than 365 days. Dates arriving from the filter
set are ISO calendar dates (YYYY-MM-DD).

USAGE:
    from busca_licitacoes.core.datetime_utils import clamp_date_range, format_date

    inicio, fim = clamp_date_range(inicio, fim)
    params["dataInicial"] = format_date(inicio)  # "20240101"
"""

import logging
from datetime import date
from typing import Optional, Tuple, Union

import pendulum

logger = logging.getLogger(__name__)

# Maximum publication window accepted by the PNCP consultation API
MAX_RANGE_DAYS = 365

DateLike = Union[date, str]


def to_date(value: DateLike) -> pendulum.Date:
    """
    Convert an ISO date string or date into a pendulum.Date.

    Args:
        value: "YYYY-MM-DD" string or date instance

    Returns:
        pendulum.Date

    Example:
        >>> to_date("2024-01-31")
        Date(2024, 1, 31)
    """
    if isinstance(value, str):
        parsed = pendulum.parse(value, exact=True)
        if isinstance(parsed, pendulum.DateTime):
            return parsed.date()
        return parsed

    return pendulum.date(value.year, value.month, value.day)


def format_date(value: DateLike) -> str:
    """
    Format a date for PNCP query params (YYYYMMDD).

    Example:
        >>> format_date("2024-01-31")
        '20240131'
    """
    return to_date(value).format("YYYYMMDD")


def clamp_date_range(
    data_inicial: DateLike,
    data_final: DateLike,
    max_days: int = MAX_RANGE_DAYS,
) -> Tuple[pendulum.Date, pendulum.Date]:
    """
    Limit a date range to at most `max_days`, keeping the final date.

    When the span exceeds the limit, the start date is moved forward so the
    window ends at `data_final` and is exactly `max_days` long.

    Args:
        data_inicial: Start date
        data_final: End date
        max_days: Maximum allowed span in days

    Returns:
        Tuple of (start, end) as pendulum.Date

    Example:
        >>> clamp_date_range("2023-01-01", "2024-02-05")
        (Date(2023, 2, 5), Date(2024, 2, 5))
    """
    inicio = to_date(data_inicial)
    fim = to_date(data_final)

    if inicio.diff(fim, False).in_days() > max_days:
        logger.warning(
            f"Período selecionado excede {max_days} dias "
            f"({inicio.isoformat()} a {fim.isoformat()}). Ajustando a data inicial."
        )
        inicio = fim.subtract(days=max_days)

    return inicio, fim


def build_date_params(
    data_inicial: Optional[DateLike],
    data_final: Optional[DateLike],
) -> dict[str, str]:
    """
    Build the dataInicial/dataFinal query params from optional bounds.

    Args:
        data_inicial: Optional start date
        data_final: Optional end date

    Returns:
        Dict with the bounds that are present, formatted YYYYMMDD

    Example:
        >>> build_date_params("2024-01-01", None)
        {'dataInicial': '20240101'}
    """
    if data_inicial and data_final:
        inicio, fim = clamp_date_range(data_inicial, data_final)
        return {"dataInicial": format_date(inicio), "dataFinal": format_date(fim)}

    params = {}
    if data_inicial:
        params["dataInicial"] = format_date(data_inicial)
    elif data_final:
        params["dataFinal"] = format_date(data_final)

    return params
