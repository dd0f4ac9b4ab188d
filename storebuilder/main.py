# storebuilder/main.py
"""
Aplicação Principal - Store Builder API
=======================================
"""

import logging
import re
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from storebuilder.api.admin import router as admin_router
from storebuilder.api.app import router as app_router
from storebuilder.core.config import config
from storebuilder.core.database import check_database_health, init_db

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerencia ciclo de vida da aplicação"""

    logger.info("=" * 60)
    logger.info("🚀 INICIANDO STORE BUILDER API")
    logger.info("=" * 60)

    # Em produção o schema é gerenciado fora da aplicação
    if not config.is_production:
        logger.info("📊 Criando tabelas do banco de dados...")
        init_db()

    logger.info(f"🌍 Ambiente: {config.ENVIRONMENT}")
    logger.info("✅ APLICAÇÃO PRONTA!")
    logger.info("=" * 60)

    yield

    logger.info("=" * 60)
    logger.info("🛑 DESLIGANDO APLICAÇÃO")
    logger.info("=" * 60)


app = FastAPI(
    title="Store Builder API",
    version="1.0.0",
    lifespan=lifespan
)

# ═══════════════════════════════════════════════════════════
# CORS
# ═══════════════════════════════════════════════════════════

if config.is_development:
    logger.info("🟢 MODO DESENVOLVIMENTO: CORS permissivo")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_allowed_origins_list(),
        allow_origin_regex=rf"https://[a-zA-Z0-9-]+\.{re.escape(config.PLATFORM_DOMAIN)}",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        max_age=3600,
    )

# ═══════════════════════════════════════════════════════════
# ROTAS
# ═══════════════════════════════════════════════════════════

app.include_router(admin_router)
app.include_router(app_router)


@app.get("/health", tags=["Health"])
def health_check() -> dict:
    database = check_database_health()
    return {
        "status": "healthy" if database["healthy"] else "degraded",
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
    }


if __name__ == "__main__":
    uvicorn.run(app, host=config.HOST, port=config.PORT)

__all__ = ["app"]
