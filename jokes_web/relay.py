import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from jokes_api.jwt.tokens import ACCESS_TOKEN_TYPE, InvalidTokenError, TokenCodec
from jokes_web.exceptions import AuthenticationError, LogoutRequired
from jokes_web.session import Session, SessionStorage

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    # 본문이 JSON 객체가 아니면 빈 dict
    try:
        data = response.json()
    except ValueError:
        logger.warning("백엔드 응답 파싱 실패: status=%s", response.status_code)
        return {}
    return data if isinstance(data, dict) else {}


class SessionRelay:
    """
    세션 쿠키에 토큰 쌍을 보관하고 백엔드 인증 API 를 중계
    - 세션은 요청마다 한 번만 복호화하여 request.state 에 보관
    """
    def __init__(self, storage: SessionStorage, http: httpx.AsyncClient, access_codec: TokenCodec):
        self.storage = storage
        self.http = http
        self.access_codec = access_codec

    @classmethod
    def from_settings(cls, settings, http: httpx.AsyncClient) -> "SessionRelay":
        storage = SessionStorage(
            settings.SESSION_SECRET,
            cookie_name=settings.SESSION_COOKIE_NAME,
            max_age=settings.session_max_age_seconds,
            secure=settings.cookie_secure,
        )
        # 검증 전용이므로 수명 값은 사용되지 않음
        codec = TokenCodec(
            settings.ACCESS_TOKEN_SECRET, settings.JWT_ISSUER, timedelta(minutes=30), ACCESS_TOKEN_TYPE
        )
        return cls(storage, http, codec)

    def load_session(self, request: Request) -> Session:
        session = getattr(request.state, "session", None)
        if session is None:
            session = self.storage.get_session(request.cookies.get(self.storage.cookie_name))
            request.state.session = session
        return session

    def get_access_token(self, request: Request) -> Optional[str]:
        """
        두 토큰이 모두 있으면 저장된 액세스 토큰 반환
        - 만료 여부는 확인하지 않음 (호출 측 401 재시도 흐름이 처리)
        """
        session = self.load_session(request)
        access_token = session.get(ACCESS_TOKEN_KEY)
        refresh_token = session.get(REFRESH_TOKEN_KEY)
        if not access_token or not refresh_token:
            return None
        return access_token

    async def refresh_access_token(self, request: Request) -> str:
        """
        /auth/token 호출로 새 액세스 토큰을 받아 세션에 저장 후 반환
        Raises:
            AuthenticationError: 세션에 리프레시 토큰이 없거나 백엔드가 거부
            LogoutRequired: 백엔드 연결 실패/타임아웃
        """
        session = self.load_session(request)
        refresh_token = session.get(REFRESH_TOKEN_KEY)
        if not refresh_token:
            raise AuthenticationError("세션에 리프레시 토큰이 없습니다.")

        try:
            response = await self.http.post("/auth/token", json={"refreshToken": refresh_token})
        except httpx.HTTPError as e:
            logger.warning("토큰 재발급 요청 실패: %s", e)
            raise LogoutRequired("인증 서버에 연결할 수 없습니다.") from e

        if response.status_code != 200:
            logger.info("토큰 재발급 거부: status=%s", response.status_code)
            raise AuthenticationError("토큰 재발급이 거부되었습니다.")

        access_token = _json_object(response).get("accessToken")
        if not access_token:
            raise AuthenticationError("응답에 액세스 토큰이 없습니다.")

        session.set(ACCESS_TOKEN_KEY, access_token)
        return access_token

    async def refresh_access_token_session(self, request: Request) -> Optional[str]:
        """
        저장된 액세스 토큰을 검증하고, 만료/무효이면 재발급 후 직렬화된 쿠키 반환
        - 토큰이 유효하거나 세션에 토큰이 없으면 None
        """
        session = self.load_session(request)
        access_token = session.get(ACCESS_TOKEN_KEY)
        if not access_token or not session.get(REFRESH_TOKEN_KEY):
            return None

        try:
            self.access_codec.decode(access_token)
            return None
        except InvalidTokenError:
            pass

        await self.refresh_access_token(request)
        logger.debug("액세스 토큰 갱신 완료")
        return self.storage.commit_session(session)

    def create_auth_session(self, request: Request, access_token: str, refresh_token: str) -> str:
        session = self.load_session(request)
        session.set(ACCESS_TOKEN_KEY, access_token)
        session.set(REFRESH_TOKEN_KEY, refresh_token)
        return self.storage.commit_session(session)

    async def login(self, username: str, password: str) -> Optional[Dict[str, str]]:
        """
        백엔드 로그인 → {accessToken, refreshToken} 또는 None
        """
        try:
            response = await self.http.post(
                "/auth/login", json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            logger.error("로그인 요청 실패: %s", e)
            return None

        if response.status_code != 200:
            logger.info("로그인 거부: status=%s", response.status_code)
            return None
        data = _json_object(response)
        access_token = data.get("accessToken")
        refresh_token = data.get("refreshToken")
        if not access_token or not refresh_token:
            return None
        return {ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token}

    async def register(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """
        백엔드 회원가입 → 생성된 사용자 또는 None
        - 백엔드는 가입 시 토큰을 주지 않으므로 호출 측에서 이어서 login 필요
        """
        try:
            response = await self.http.post(
                "/auth/register", json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            logger.error("회원가입 요청 실패: %s", e)
            return None

        if response.status_code != 200:
            logger.info("회원가입 거부: status=%s", response.status_code)
            return None
        return _json_object(response).get("user")

    async def logout(self, request: Request) -> str:
        """
        백엔드에 리프레시 토큰 블랙리스트 등록을 요청한 뒤 세션 삭제
        - 백엔드 실패는 로그만 남기고 로컬 세션은 항상 삭제
        """
        session = self.load_session(request)
        refresh_token = session.get(REFRESH_TOKEN_KEY)
        if refresh_token:
            try:
                response = await self.http.request(
                    "DELETE", "/auth/logout", json={"refreshToken": refresh_token}
                )
                if response.status_code != 200:
                    logger.warning("백엔드 로그아웃 거부: status=%s", response.status_code)
            except httpx.HTTPError as e:
                logger.warning("백엔드 로그아웃 요청 실패: %s", e)
        return self.storage.destroy_session(session)
