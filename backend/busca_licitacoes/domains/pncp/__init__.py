"""
PNCP (Portal Nacional de Contratações Públicas) Domain Models.

This package contains the domain enums and utilities for working with the PNCP API.

Usage:
    >>> from busca_licitacoes.domains.pncp import resolve_modalidades
    >>> [m.value for m in resolve_modalidades(["pregão eletrônico"])]
    [6]
"""

from .modalidade_contratacao import ModalidadeContratacao
from .utils import resolve_modalidades

__all__ = [
    "ModalidadeContratacao",
    "resolve_modalidades",
]
