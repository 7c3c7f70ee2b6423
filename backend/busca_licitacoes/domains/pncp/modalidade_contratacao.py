"""
PNCP Domain: Modalidade de Contratação.

Defines the procurement method used for the bidding process, and the
human-readable names accepted in search filters.
"""

from enum import Enum
from typing import Optional

# Suffix dropped from names before lookup ("dispensa de licitação" -> "dispensa")
NOME_SUFFIX = " de licitação"


class ModalidadeContratacao(int, Enum):
    """
    Modalidade de contratação conforme Lei 14.133/2021.

    Reference: PNCP API Documentation - Section 5.2
    """

    LEILAO_ELETRONICO = 1
    DIALOGO_COMPETITIVO = 2
    CONCURSO = 3
    CONCORRENCIA_ELETRONICA = 4
    CONCORRENCIA_PRESENCIAL = 5
    PREGAO_ELETRONICO = 6
    PREGAO_PRESENCIAL = 7
    DISPENSA_LICITACAO = 8
    INEXIGIBILIDADE = 9
    MANIFESTACAO_INTERESSE = 10
    PRE_QUALIFICACAO = 11
    CREDENCIAMENTO = 12
    LEILAO_PRESENCIAL = 13

    @property
    def nome(self) -> str:
        """Nome oficial em português (ex: 'pregão eletrônico')."""
        return _NOMES[self]

    @classmethod
    def get_all(cls) -> list["ModalidadeContratacao"]:
        """Retorna todas as modalidades."""
        return list(cls)

    @classmethod
    def from_nome(cls, nome: str) -> Optional["ModalidadeContratacao"]:
        """
        Busca modalidade pelo nome legível.

        Case-insensitive; the suffix " de licitação" is removed before lookup.

        Args:
            nome: Nome da modalidade (ex: "Pregão Eletrônico")

        Returns:
            Enum correspondente, ou None se o nome não for reconhecido

        Example:
            >>> ModalidadeContratacao.from_nome("Dispensa de Licitação")
            <ModalidadeContratacao.DISPENSA_LICITACAO: 8>
            >>> ModalidadeContratacao.from_nome("tomada de preços") is None
            True
        """
        normalized = nome.lower().replace(NOME_SUFFIX, "").strip()
        return _POR_NOME.get(normalized)


_NOMES = {
    ModalidadeContratacao.LEILAO_ELETRONICO: "leilão eletrônico",
    ModalidadeContratacao.DIALOGO_COMPETITIVO: "diálogo competitivo",
    ModalidadeContratacao.CONCURSO: "concurso",
    ModalidadeContratacao.CONCORRENCIA_ELETRONICA: "concorrência eletrônica",
    ModalidadeContratacao.CONCORRENCIA_PRESENCIAL: "concorrência presencial",
    ModalidadeContratacao.PREGAO_ELETRONICO: "pregão eletrônico",
    ModalidadeContratacao.PREGAO_PRESENCIAL: "pregão presencial",
    ModalidadeContratacao.DISPENSA_LICITACAO: "dispensa de licitação",
    ModalidadeContratacao.INEXIGIBILIDADE: "inexigibilidade de licitação",
    ModalidadeContratacao.MANIFESTACAO_INTERESSE: "manifestação de interesse",
    ModalidadeContratacao.PRE_QUALIFICACAO: "pré-qualificação",
    ModalidadeContratacao.CREDENCIAMENTO: "credenciamento",
    ModalidadeContratacao.LEILAO_PRESENCIAL: "leilão presencial",
}

# Keyed by normalized name (suffix removed)
_POR_NOME = {
    nome.replace(NOME_SUFFIX, ""): modalidade for modalidade, nome in _NOMES.items()
}
