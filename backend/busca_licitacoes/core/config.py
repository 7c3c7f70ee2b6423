# backend/busca_licitacoes/core/config.py
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


def get_project_root() -> Path:
    """
    Get the project root directory (where .env file is located).

    Returns:
        Path: Absolute path to project root
    """
    # From backend/busca_licitacoes/core/config.py -> go up 3 levels to project root
    return Path(__file__).parent.parent.parent.parent.resolve()


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and the root .env.

    Groups:
    - App: name, environment and logging
    - PNCP: consultation API endpoint, timeouts and throttling
    - Search: overall deadline for a multi-modality search
    - Rate limit: per-client window at the HTTP boundary
    - OpenAI: filter extraction from free-text questions
    """

    # App
    APP_NAME: str = "Busca Licitações API"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    TZ: str = "America/Sao_Paulo"

    # PNCP
    PNCP_CONSULTA_API_URL: str = "https://pncp.gov.br/api/consulta"
    PNCP_TIMEOUT: float = 60.0
    PNCP_PAGE_SIZE: int = 50
    PNCP_RATE_LIMIT_DELAY: float = 0.0
    PNCP_MAX_ATTEMPTS: int = 1
    PNCP_INTER_MODALITY_DELAY: float = 0.2

    # Search
    SEARCH_DEADLINE_SECONDS: Optional[float] = None

    # Rate limit (per client identity)
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0
    RATE_LIMIT_MAX_REQUESTS: int = 20

    # OpenAI (filter extraction)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT: float = 30.0

    class Config:
        # Load from project root .env file
        env_file = str(get_project_root() / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "allow"  # Allow extra fields from .env


settings = Settings()
