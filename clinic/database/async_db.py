import logging
from typing import AsyncGenerator

from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from clinic.config.settings import Settings, get_settings
from clinic.models.db.base import Base

logger = logging.getLogger(__name__)

# Engine y session maker se crean en el primer uso
_async_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_async_database_engine(settings: Settings | None = None) -> AsyncEngine:
    """Crea el engine de base de datos asíncrono"""
    settings = settings or get_settings()

    # Configuración base común
    base_config = {
        "echo": settings.DB_ECHO,
        "future": True,
    }

    if settings.is_sqlite:
        # SQLite (tests y desarrollo local): sin parámetros de pool
        logger.info("Creating async database engine for SQLite")
        engine_config = base_config
    elif settings.DEBUG:
        # Para desarrollo: usar NullPool (sin pooling)
        logger.info("Creating async database engine for DEVELOPMENT (NullPool)")
        engine_config = {
            **base_config,
            "pool_pre_ping": True,
            "poolclass": NullPool,
        }
    else:
        # Para producción: usar pool completo
        logger.info("Creating async database engine for PRODUCTION (pooled)")
        engine_config = {
            **base_config,
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_recycle": settings.DB_POOL_RECYCLE,
            "pool_timeout": 30,
        }

    try:
        return create_async_engine(settings.DATABASE_URL, **engine_config)
    except Exception as e:
        logger.error(f"Failed to create async database engine: {e}")
        raise


def init_engine(settings: Settings) -> AsyncEngine:
    """Crea (o reemplaza) el engine del proceso a partir de la configuración dada"""
    global _async_engine, _session_factory
    _async_engine = create_async_database_engine(settings)
    _session_factory = None
    return _async_engine


def get_async_engine() -> AsyncEngine:
    """Retorna el engine del proceso, creándolo si hace falta"""
    global _async_engine
    if _async_engine is None:
        _async_engine = create_async_database_engine()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Retorna el session maker asíncrono del proceso"""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_async_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency para obtener la sesión de base de datos asíncrona.
    Hace commit al terminar el request y rollback si hubo error.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Async database error: {e}")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine | None = None, tables: list[Table] | None = None) -> None:
    """Crea las tablas indicadas (o todas las registradas en Base.metadata)"""
    engine = engine or get_async_engine()
    try:
        async with engine.begin() as conn:
            logger.info("Creando tablas...")
            await conn.run_sync(Base.metadata.create_all, tables=tables)
            logger.info("Tablas creadas exitosamente")
    except Exception as e:
        logger.error(f"Error creando tablas: {e}")
        raise


async def dispose_engine() -> None:
    """Cierra el pool de conexiones del proceso"""
    global _async_engine, _session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Database engine disposed")
    _async_engine = None
    _session_factory = None
