"""
Configuración de fixtures para pytest.
"""
from typing import AsyncGenerator, Callable, List

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from timetable_sync.domain.entities.timetable import TimetableItem
from timetable_sync.infrastructure.database.session import Base, build_engine, build_session_factory
from timetable_sync.infrastructure.database import models  # noqa: F401


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def session_factory() -> AsyncGenerator[Callable[[], AsyncSession], None]:
    """
    Session factory sobre una base en memoria compartida por todas las
    sesiones del test (StaticPool = una sola conexion).
    """
    engine = build_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def items_factory() -> Callable[..., List[TimetableItem]]:
    """Construye `count` candidatos validos para un grupo."""
    def _factory(
        group: str,
        count: int,
        date: str = "2024-11-07T00:00:00+00:00",
        teacher_name: str = "Иванов И.И.",
    ) -> List[TimetableItem]:
        return [
            TimetableItem(
                group=group,
                date=date,
                time=f"{9 + i:02d}:00",
                subject=f"Предмет {i}",
                teacher_name=teacher_name,
            )
            for i in range(count)
        ]
    return _factory
