from sqlalchemy.ext.asyncio import create_async_engine

from config import settings


def to_sqlalchemy_url(database_url: str) -> str:
    """asyncpg용 DSN(postgresql://) -> SQLAlchemy async URL(postgresql+asyncpg://)"""
    for prefix in ("postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return "postgresql+asyncpg://" + database_url[len(prefix):]
    return database_url


# 스키마 생성(scripts/init_db.py) 전용. API 요청은 utils.database 의 asyncpg 풀 사용
engine = create_async_engine(to_sqlalchemy_url(settings.database_url))
