"""
Engine y sesiones del almacen del horario.

Las escrituras (borrado e insercion por grupo) las confirma el motor de
reemplazo en TimetableUseCases; las sesiones de este modulo nunca hacen
commit por su cuenta.
"""
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from timetable_sync.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()

# Segundos que SQLite espera un lock de escritura. Dos corridas del sync
# pueden solaparse y escribir sobre el mismo archivo.
SQLITE_BUSY_TIMEOUT_S = 30


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def build_engine(database_url: str, **overrides) -> AsyncEngine:
    """
    Crea el engine segun el tipo de base de datos.

    - PostgreSQL: pool de conexiones con pre-ping.
    - SQLite: sin pool configurable; busy timeout para tolerar corridas
      solapadas del sync.

    Args:
        database_url: URL async (sqlite+aiosqlite o postgresql+asyncpg)
        overrides: argumentos extra para create_async_engine (ej. poolclass)
    """
    args = {"echo": settings.DEBUG}

    if _is_sqlite(database_url):
        args["connect_args"] = {"timeout": SQLITE_BUSY_TIMEOUT_S}
    else:
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,
        })

    args.update(overrides)
    return create_async_engine(database_url, **args)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Sesiones sin expire_on_commit: los registros se leen despues del commit."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Sesion por request para FastAPI.

    Las consultas del horario no escriben; si algo falla a mitad del request
    se descarta lo pendiente.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Crea la tabla del horario si no existe (desarrollo y SQLite)."""
    from timetable_sync.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    location = settings.DATABASE_URL.split("@")[-1]
    logger.debug(f"Esquema del horario verificado en {location}")


async def close_db() -> None:
    """Cierra las conexiones del engine."""
    await engine.dispose()
