import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.core.config import Settings
from jokes_api.core.database import get_db_session
from jokes_api.jwt.blocklist import RevocationRegistry
from jokes_api.jwt.tokens import InvalidTokenError, TokenClaims, TokenIssuer
from jokes_api.services.auth_service import AuthService
from jokes_api.services.credential_service import CredentialService
from jokes_api.utils.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """
    보호된 라우트에 전달되는 인증 주체
    - user_id: 토큰 sub
    - claims: 검증된 액세스 토큰 클레임
    """
    user_id: str
    claims: TokenClaims


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_revocation_registry(request: Request) -> RevocationRegistry:
    return request.app.state.revocation_registry


def get_credential_service(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> CredentialService:
    return CredentialService(db, request.app.state.pwd_context)


def get_auth_service(
    credentials: CredentialService = Depends(get_credential_service),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    registry: RevocationRegistry = Depends(get_revocation_registry),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    """
    AuthService 의존성 주입 함수
    - 요청마다 DB 세션을 묶은 CredentialService 와 앱 공용 발급기/레지스트리로 생성
    """
    return AuthService(
        credentials,
        token_issuer,
        registry,
        blacklist_ttl_seconds=settings.REFRESH_BLACKLIST_TTL_SECONDS,
    )


def _authenticate(
    credentials: Optional[HTTPAuthorizationCredentials],
    token_issuer: TokenIssuer,
) -> AuthenticatedPrincipal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("인증 토큰이 없습니다.")
    try:
        claims = token_issuer.verify_access_token(credentials.credentials)
    except InvalidTokenError as e:
        # 401 을 받은 클라이언트는 /auth/token 으로 액세스 토큰을 재발급해야 함
        logger.warning("액세스 토큰 검증 실패: %s", e.message)
        raise UnauthorizedError("액세스 토큰이 유효하지 않습니다. /auth/token 으로 재발급하세요.")
    return AuthenticatedPrincipal(user_id=claims.user_id, claims=claims)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthenticatedPrincipal:
    """
    보호된 라우트용 종속성 함수
    1) Authorization: Bearer 헤더 확인 (없거나 형식 오류면 401)
    2) 액세스 토큰 서명/만료 검증 (실패 시 401)
    3) AuthenticatedPrincipal 반환
    """
    return _authenticate(credentials, token_issuer)


async def get_optional_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> Optional[AuthenticatedPrincipal]:
    """
    선택적 인증 함수
    - Authorization 헤더 자체가 없으면 None
    - 헤더가 있는데 잘못된 경우는 401 (클라이언트 재발급 흐름 유도)
    """
    if "authorization" not in request.headers:
        return None
    return _authenticate(credentials, token_issuer)
