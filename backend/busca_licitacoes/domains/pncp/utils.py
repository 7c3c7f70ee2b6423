"""
PNCP Domain Utilities.

Helper functions for working with PNCP domain enums.
"""

import logging
from typing import Iterable, Optional

from .modalidade_contratacao import ModalidadeContratacao

logger = logging.getLogger(__name__)


def resolve_modalidades(
    nomes: Optional[Iterable[str]] = None,
) -> list[ModalidadeContratacao]:
    """
    Converte nomes legíveis de modalidades nos códigos da API.

    Nomes sem correspondência são descartados silenciosamente. Sem nomes,
    retorna todas as 13 modalidades.

    Args:
        nomes: Nomes de modalidades (ex: ["pregão eletrônico", "concurso"])

    Returns:
        Lista de enums, na ordem dos nomes informados e sem repetições

    Example:
        >>> resolve_modalidades(["Pregão Eletrônico", "Leilão Eletrônico", "xyz"])
        [<ModalidadeContratacao.PREGAO_ELETRONICO: 6>, <ModalidadeContratacao.LEILAO_ELETRONICO: 1>]
        >>> len(resolve_modalidades([]))
        13
    """
    nomes = list(nomes or [])
    if not nomes:
        return ModalidadeContratacao.get_all()

    modalidades = []
    for nome in nomes:
        modalidade = ModalidadeContratacao.from_nome(nome)
        if modalidade is None:
            logger.debug(f"Modalidade desconhecida ignorada: {nome!r}")
            continue
        if modalidade not in modalidades:
            modalidades.append(modalidade)

    return modalidades
