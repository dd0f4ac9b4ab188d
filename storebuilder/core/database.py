"""
Database Layer
==============

Engine, sessões e dependências do FastAPI para acesso ao banco.

- ✅ Pool de conexões por ambiente
- ✅ Rollback automático em erro
- ✅ Health check simples
"""

import logging
import time
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, NullPool, StaticPool

from storebuilder.core.config import config

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════
# CONFIGURAÇÕES
# ═══════════════════════════════════════════════════════════

class DatabaseConfig:
    """Configurações centralizadas do banco de dados"""

    # Pool de Conexões - Produção
    PRODUCTION_POOL_SIZE = 20
    PRODUCTION_MAX_OVERFLOW = 20
    PRODUCTION_POOL_TIMEOUT = 10
    PRODUCTION_POOL_RECYCLE = 1800  # Recicla a cada 30min

    # Pool de Conexões - Desenvolvimento
    DEV_POOL_SIZE = 5
    DEV_MAX_OVERFLOW = 10
    DEV_POOL_TIMEOUT = 30
    DEV_POOL_RECYCLE = 3600


# ═══════════════════════════════════════════════════════════
# ENGINE CONFIGURATION
# ═══════════════════════════════════════════════════════════

def get_engine_config() -> dict:
    """
    Retorna configuração do engine baseada no ambiente

    Returns:
        dict: Configuração do SQLAlchemy engine
    """

    if config.is_sqlite:
        # SQLite não suporta pool de conexões real; em memória precisa de
        # uma única conexão compartilhada entre threads.
        engine_config = {
            "connect_args": {"check_same_thread": False},
            "echo": config.DEBUG,
        }
        if ":memory:" in config.DATABASE_URL:
            engine_config["poolclass"] = StaticPool
        return engine_config

    if config.is_production:
        return {
            "poolclass": QueuePool,
            "pool_size": DatabaseConfig.PRODUCTION_POOL_SIZE,
            "max_overflow": DatabaseConfig.PRODUCTION_MAX_OVERFLOW,
            "pool_timeout": DatabaseConfig.PRODUCTION_POOL_TIMEOUT,
            "pool_recycle": DatabaseConfig.PRODUCTION_POOL_RECYCLE,
            "pool_pre_ping": True,
            "echo": False,
            "connect_args": {
                "connect_timeout": 10,
                "application_name": "storebuilder_api",
            },
        }
    elif config.is_test:
        return {
            "poolclass": NullPool,
            "echo": False,
        }
    else:
        return {
            "poolclass": QueuePool,
            "pool_size": DatabaseConfig.DEV_POOL_SIZE,
            "max_overflow": DatabaseConfig.DEV_MAX_OVERFLOW,
            "pool_timeout": DatabaseConfig.DEV_POOL_TIMEOUT,
            "pool_recycle": DatabaseConfig.DEV_POOL_RECYCLE,
            "pool_pre_ping": True,
            "echo": config.DEBUG,
        }


engine_config = get_engine_config()
engine = create_engine(config.DATABASE_URL, **engine_config)


@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Executado quando uma nova conexão é criada"""
    logger.debug("🔵 Nova conexão criada no pool")


# ═══════════════════════════════════════════════════════════
# SESSION MAKERS
# ═══════════════════════════════════════════════════════════

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False
)


# ═══════════════════════════════════════════════════════════
# DATABASE DEPENDENCIES
# ═══════════════════════════════════════════════════════════

def get_db():
    """
    Dependency para operações no banco

    Faz rollback e registra a exceção se a rota falhar.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"❌ Erro na sessão: {e}", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()


get_db_manager = contextmanager(get_db)

GetDBDep = Annotated[Session, Depends(get_db)]


# ═══════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════

def check_database_health() -> dict:
    """
    Verifica a conexão com o banco de dados

    Returns:
        dict: Status de saúde com latência em ms
    """
    started = time.perf_counter()
    try:
        with get_db_manager() as db:
            db.execute(text("SELECT 1")).scalar()
    except Exception as e:
        logger.error(f"❌ Banco indisponível: {e}")
        return {"healthy": False, "error": str(e)}

    return {
        "healthy": True,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }


def init_db() -> None:
    """Cria as tabelas que ainda não existem (fora de produção)"""
    from storebuilder.core import models

    models.Base.metadata.create_all(bind=engine)
    logger.info("✅ Tabelas verificadas/criadas")
