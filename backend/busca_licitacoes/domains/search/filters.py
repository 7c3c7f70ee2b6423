"""
Search Domain: structured filters derived from a free-text question.

Field names follow the wire contract of the extraction service
(camelCase, Portuguese), so a JSON reply validates directly into FilterSet.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterSet(BaseModel):
    """
    Filtros estruturados de uma busca de licitações.

    Attributes:
        palavrasChave: Palavras-chave buscadas no objeto da compra
        sinonimos: Grupos de sinônimos (cada termo vale como palavra-chave)
        blacklist: Termos que excluem a licitação
        valorMin: Valor mínimo (inclusivo), None = sem limite
        valorMax: Valor máximo (inclusivo), None = sem limite
        dataInicial: Data inicial de publicação
        dataFinal: Data final de publicação
        estado: UF (ex: "SP")
        modalidades: Nomes de modalidades; vazio = todas
    """

    model_config = ConfigDict(extra="ignore")

    palavrasChave: list[str] = Field(default_factory=list)
    sinonimos: list[list[str]] = Field(default_factory=list)
    blacklist: list[str] = Field(default_factory=list)
    valorMin: Optional[float] = None
    valorMax: Optional[float] = None
    dataInicial: Optional[date] = None
    dataFinal: Optional[date] = None
    estado: Optional[str] = None
    modalidades: list[str] = Field(default_factory=list)

    @field_validator("dataInicial", "dataFinal", "estado", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("palavrasChave", "blacklist", "modalidades", "sinonimos", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @property
    def search_terms(self) -> list[str]:
        """Keywords plus every synonym, lower-cased, blanks removed."""
        terms = [k.lower() for k in self.palavrasChave]
        terms.extend(s.lower() for grupo in self.sinonimos for s in grupo)
        return [t for t in terms if t]

