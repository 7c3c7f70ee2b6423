"""Search domain: filter set and result envelopes."""

from .envelope import ApiResponse, PageResponse
from .filters import FilterSet

__all__ = ["ApiResponse", "FilterSet", "PageResponse"]
