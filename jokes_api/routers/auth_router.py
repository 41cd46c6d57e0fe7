import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from jokes_api.dependencies import (
    AuthenticatedPrincipal, get_auth_service, get_current_principal
)
from jokes_api.schemas.auth_schema import (
    CredentialsRequest, MessageResponse, RefreshTokenRequest, TokenResponse,
    UserEnvelope, UserResponse
)
from jokes_api.services.auth_service import AuthService

# 로거 설정
logger = logging.getLogger(__name__)

# 라우터 인스턴스
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserEnvelope)
async def register(
    req: Optional[CredentialsRequest] = Body(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserEnvelope:
    """
    회원가입 처리 후 생성된 사용자 반환
    - 토큰은 발급하지 않으므로 클라이언트는 별도로 로그인해야 함
    """
    req = req or CredentialsRequest()
    user = await auth_service.register(req.username, req.password)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    req: Optional[CredentialsRequest] = Body(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    아이디/비밀번호 로그인 후 액세스/리프레시 토큰 반환
    """
    req = req or CredentialsRequest()
    tokens = await auth_service.login(req.username, req.password)
    return TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/token", response_model=TokenResponse)
async def refresh_token(
    req: Optional[RefreshTokenRequest] = Body(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    리프레시 토큰 검증 후 새로운 액세스 토큰을 발급
    """
    token = req.refresh_token if req else None
    tokens = await auth_service.refresh(token)
    return TokenResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.delete("/logout", response_model=MessageResponse)
async def logout(
    req: Optional[RefreshTokenRequest] = Body(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    리프레시 토큰 블랙리스트 등록으로 로그아웃 처리를 수행
    """
    token = req.refresh_token if req else None
    await auth_service.logout(token)
    return MessageResponse(message="Successfully logged out manually")


@router.get("/test", response_model=MessageResponse)
async def auth_test(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
) -> MessageResponse:
    """
    토큰 검증용 보호된 라우트
    """
    return MessageResponse(message="Authorized")
