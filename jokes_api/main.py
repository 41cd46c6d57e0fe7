import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from jokes_api.core.config import Settings, get_settings
from jokes_api.core.database import build_engine, build_session_factory, init_db
from jokes_api.jwt.blocklist import RevocationRegistry, build_revocation_registry
from jokes_api.jwt.tokens import TokenIssuer
from jokes_api.routers.auth_router import router as auth_router
from jokes_api.routers.jokes_router import router as jokes_router
from jokes_api.routers.user_router import router as user_router
from jokes_api.services.credential_service import build_password_context
from jokes_api.utils.exceptions import ApiError

logger = logging.getLogger(__name__)


# ─── 애플리케이션 수명 주기 이벤트 핸들러 정의 ─────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    앱 시작 시 DB 테이블 생성, 종료 시 레지스트리/엔진 정리
    """
    await init_db(app.state.engine)
    yield
    await app.state.revocation_registry.close()
    await app.state.engine.dispose()


# ─── 예외 처리 핸들러 ───────────────────────────────────────────────────
async def handle_api_error(request: Request, exc: ApiError):
    """
    ApiError 하위 예외를 status_code 에 맞춰 일괄 처리
    """
    return ORJSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_unexpected_error(request: Request, exc: Exception):
    """
    처리되지 않은 예외는 로그만 남기고 고정 메시지로 500 반환 (스택트레이스 비노출)
    """
    logger.exception("처리되지 않은 예외: %s %s", request.method, request.url.path)
    return ORJSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[RevocationRegistry] = None,
) -> FastAPI:
    """
    FastAPI 애플리케이션 생성
    - settings 미지정 시 환경 변수에서 로드 (비밀키 누락 시 여기서 실패)
    - registry 를 주입하면 설정과 무관하게 해당 구현 사용
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Remix Jokes API",
        description="농담 CRUD 및 액세스/리프레시 토큰 인증 제공",
        version="1.0.0",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )

    # 요청 간 공유 의존성
    engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer.from_settings(settings)
    app.state.revocation_registry = registry or build_revocation_registry(settings)
    app.state.pwd_context = build_password_context(settings.BCRYPT_ROUNDS)

    # ─── CORS 설정 ─────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def ensure_utf8(request: Request, call_next):
        """
        모든 JSON 응답에 UTF-8 charset을 명시적으로 추가
        """
        resp = await call_next(request)
        ctype = resp.headers.get("Content-Type", "")
        if ctype.startswith("application/json") and "charset" not in ctype.lower():
            resp.headers["Content-Type"] = "application/json; charset=utf-8"
        return resp

    @app.get("/health")
    async def health_check() -> dict:
        """
        서비스 상태 확인용 엔드포인트
        """
        return {"status": "ok"}

    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # ─── 라우터 등록 ───────────────────────────────────────────────────
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(jokes_router)
    return app


if __name__ == "__main__":
    uvicorn.run(
        "jokes_api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
