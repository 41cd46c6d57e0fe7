from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
)
from sqlalchemy.orm import declarative_base

# ORM 베이스
Base = declarative_base()


def build_engine(database_url: str) -> AsyncEngine:
    """
    DB URL에 맞는 비동기 엔진을 생성
    - MySQL(asyncmy)일 경우 utf8mb4 접속 옵션과 커넥션 재활용 설정 추가
    """
    if database_url.startswith("mysql+asyncmy://"):
        return create_async_engine(
            database_url,
            echo=False,
            connect_args={
                "charset": "utf8mb4",
                "init_command": "SET NAMES utf8mb4 COLLATE utf8mb4_unicode_ci",
            },
            pool_recycle=1800,
            pool_pre_ping=True,
        )
    return create_async_engine(database_url, echo=False)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    엔진에 바인딩된 세션 팩토리 생성
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    애플리케이션 시작 시 호출하여 메타데이터 기반 테이블을 생성
    """
    # 모델 import로 메타데이터 등록
    from jokes_api.models import user, joke  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 종속성: 요청마다 새로운 DB 세션을 생성 후 반환
    """
    async with request.app.state.session_factory() as session:
        yield session
