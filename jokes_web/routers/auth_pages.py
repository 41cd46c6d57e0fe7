import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from jokes_web.dependencies import get_relay
from jokes_web.pages import login_form, render_page
from jokes_web.relay import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, SessionRelay

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Auth Pages"])


def _safe_redirect(target: str) -> str:
    # 외부 주소로의 오픈 리다이렉트 방지
    if not target.startswith("/") or target.startswith("//"):
        return "/jokes"
    return target


def _session_redirect(target: str, cookie: str) -> RedirectResponse:
    response = RedirectResponse(_safe_redirect(target), status_code=303)
    response.headers.append("set-cookie", cookie)
    return response


@router.get("/login")
async def login_page(redirectTo: str = "/jokes"):
    return render_page("Login", login_form(redirect_to=redirectTo))


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    redirectTo: str = Form("/jokes"),
    relay: SessionRelay = Depends(get_relay),
):
    """
    로그인 성공 시 토큰 쌍을 세션 쿠키에 저장하고 이동
    """
    tokens = await relay.login(username, password)
    if tokens is None:
        return render_page(
            "Login", login_form("Username/Password combination is incorrect", redirectTo), 400
        )
    cookie = relay.create_auth_session(request, tokens[ACCESS_TOKEN_KEY], tokens[REFRESH_TOKEN_KEY])
    return _session_redirect(redirectTo, cookie)


@router.post("/register")
async def register(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    redirectTo: str = Form("/jokes"),
    relay: SessionRelay = Depends(get_relay),
):
    """
    회원가입 후 같은 자격 증명으로 로그인까지 진행
    - 백엔드 회원가입은 토큰을 발급하지 않음
    """
    user = await relay.register(username, password)
    if user is None:
        return render_page(
            "Login", login_form("Could not register user", redirectTo), 400
        )
    tokens = await relay.login(username, password)
    if tokens is None:
        return render_page(
            "Login", login_form("Registered, but login failed", redirectTo), 400
        )
    cookie = relay.create_auth_session(request, tokens[ACCESS_TOKEN_KEY], tokens[REFRESH_TOKEN_KEY])
    return _session_redirect(redirectTo, cookie)


@router.post("/logout")
async def logout(request: Request, relay: SessionRelay = Depends(get_relay)):
    cookie = await relay.logout(request)
    response = RedirectResponse("/login", status_code=303)
    response.headers.append("set-cookie", cookie)
    return response
