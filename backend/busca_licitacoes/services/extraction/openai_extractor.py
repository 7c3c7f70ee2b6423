"""
Filter extraction backed by an OpenAI-compatible chat API.

Turns a free-text procurement question into a FilterSet. The model is asked
for a JSON object with the FilterSet fields, and the reply is validated with
pydantic before it reaches the search pipeline.
"""

import logging
from typing import Optional, Protocol

import openai
import pendulum
from pydantic import ValidationError

from ...core.errors import FilterExtractionError
from ...domains.pncp import ModalidadeContratacao
from ...domains.search import FilterSet

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """Você extrai filtros de busca de licitações públicas a partir de uma pergunta.
Responda somente com um objeto JSON com os campos:
- "palavrasChave": lista de palavras-chave do objeto da compra
- "sinonimos": lista de listas, um grupo de sinônimos para cada palavra-chave
- "blacklist": lista de termos que o usuário quer excluir
- "valorMin": número ou null
- "valorMax": número ou null
- "dataInicial": data "YYYY-MM-DD" ou null
- "dataFinal": data "YYYY-MM-DD" ou null
- "estado": sigla da UF (ex: "SP") ou null
- "modalidades": lista de nomes entre: {modalidades}
Hoje é {hoje}."""


class FilterExtractor(Protocol):
    """Anything that turns a question into a FilterSet."""

    def extract(self, question: str) -> FilterSet: ...


class OpenAIFilterExtractor:
    """FilterExtractor using the OpenAI chat completions API in JSON mode."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        timezone: str = "America/Sao_Paulo",
        client: Optional[openai.OpenAI] = None,
    ):
        self.model = model
        self.timezone = timezone
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> openai.OpenAI:
        # Created on first use so a missing key fails the request, not startup
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    @classmethod
    def from_settings(cls, settings) -> "OpenAIFilterExtractor":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            timeout=settings.OPENAI_TIMEOUT,
            timezone=settings.TZ,
        )

    def _system_prompt(self) -> str:
        nomes = ", ".join(f'"{m.nome}"' for m in ModalidadeContratacao.get_all())
        hoje = pendulum.today(self.timezone).to_date_string()
        return SYSTEM_PROMPT.format(modalidades=nomes, hoje=hoje)

    def extract(self, question: str) -> FilterSet:
        """
        Extract structured filters from a question.

        Args:
            question: Free-text question (ex: "limpeza urbana em SP acima de 50 mil")

        Returns:
            FilterSet

        Raises:
            FilterExtractionError: API failure, empty reply or invalid JSON
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._system_prompt()},
                    {"role": "user", "content": question},
                ],
                response_format={"type": "json_object"},
                temperature=0,
            )
        except openai.OpenAIError as e:
            raise FilterExtractionError(f"Falha na extração de filtros: {e}") from e

        content = response.choices[0].message.content
        if not content:
            raise FilterExtractionError("Extração de filtros retornou resposta vazia")

        try:
            filters = FilterSet.model_validate_json(content)
        except ValidationError as e:
            raise FilterExtractionError(f"Filtros extraídos inválidos: {e}") from e

        logger.info(f"Filtros extraídos: {filters.model_dump()}")
        return filters
