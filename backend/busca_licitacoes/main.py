import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.licitacoes import router as licitacoes_router
from .core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Busca Licitações API",
    description="Busca de licitações no PNCP a partir de perguntas em linguagem natural",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configurar depois
    allow_credentials=True,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(licitacoes_router)


@app.get("/")
async def root():
    return {"message": "Busca Licitações API", "version": "0.1.0", "status": "healthy"}


@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "pncp": settings.PNCP_CONSULTA_API_URL,
        "environment": settings.ENVIRONMENT,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("busca_licitacoes.main:app", host="0.0.0.0", port=8000, reload=True)
