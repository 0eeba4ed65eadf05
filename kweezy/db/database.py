"""
Database engine and session management
"""
from sqlalchemy import BigInteger, Integer
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from kweezy.core.config import settings


def _engine_options(url: str) -> dict:
    # sqlite (dev/test) takes no pool sizing options
    if url.startswith("sqlite"):
        return {"echo": settings.DEBUG}
    return {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


# Async engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Primary/foreign key type; sqlite only autoincrements INTEGER PRIMARY KEY
BigInt = BigInteger().with_variant(Integer, "sqlite")

# Declarative base
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    Request-scoped database session dependency
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind=None) -> None:
    """
    Create all tables (development and seeding helper)
    """
    import kweezy.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
