import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from jokes_web.api_client import JokesApiClient
from jokes_web.core.config import WebSettings, get_web_settings
from jokes_web.exceptions import ApiRequestError, AuthenticationError, LogoutRequired, WebError
from jokes_web.pages import render_page
from jokes_web.relay import SessionRelay
from jokes_web.routers.auth_pages import router as auth_pages_router
from jokes_web.routers.jokes_pages import router as jokes_pages_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.http.aclose()


async def handle_forced_logout(request: Request, exc: WebError):
    """
    인증 복구 불가: 세션 쿠키를 지우고 로그인 페이지로 이동
    """
    logger.info("강제 로그아웃: %s", exc.message)
    relay: SessionRelay = request.app.state.relay
    cookie = relay.storage.destroy_session(relay.load_session(request))
    response = RedirectResponse("/login", status_code=303)
    response.headers.append("set-cookie", cookie)
    return response


async def handle_api_request_error(request: Request, exc: ApiRequestError):
    """
    라우터에서 처리하지 않은 백엔드 오류는 오류 페이지로 표시
    """
    logger.warning("백엔드 요청 실패: %s %s status=%s", request.method, request.url.path, exc.status_code)
    status_code = exc.status_code if 400 <= exc.status_code < 500 else 502
    return render_page("Error", "<p role=\"alert\">Something went wrong. Please try again.</p>", status_code)


def create_app(
    settings: Optional[WebSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    프론트엔드 애플리케이션 생성
    - transport 를 주입하면 백엔드 호출을 해당 transport 로 보냄 (테스트용)
    """
    settings = settings or get_web_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title="Remix Jokes", lifespan=lifespan)

    http = httpx.AsyncClient(
        base_url=settings.API_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
        transport=transport,
    )
    relay = SessionRelay.from_settings(settings, http)
    app.state.settings = settings
    app.state.http = http
    app.state.relay = relay
    app.state.api_client = JokesApiClient(http, relay)

    @app.middleware("http")
    async def commit_session(request: Request, call_next):
        """
        핸들러에서 세션이 바뀌었으면 (예: 토큰 재발급) 응답에 쿠키를 다시 기록
        """
        response = await call_next(request)
        session = getattr(request.state, "session", None)
        if session is not None and session.modified and not session.destroyed:
            response.headers.append("set-cookie", relay.storage.commit_session(session))
        return response

    app.add_exception_handler(LogoutRequired, handle_forced_logout)
    app.add_exception_handler(AuthenticationError, handle_forced_logout)
    app.add_exception_handler(ApiRequestError, handle_api_request_error)

    app.include_router(auth_pages_router)
    app.include_router(jokes_pages_router)
    return app


if __name__ == "__main__":
    uvicorn.run(
        "jokes_web.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
