import logging

from fastapi import APIRouter, Depends

from jokes_api.dependencies import (
    AuthenticatedPrincipal, get_credential_service, get_current_principal
)
from jokes_api.schemas.auth_schema import UserEnvelope, UserResponse
from jokes_api.services.credential_service import CredentialService
from jokes_api.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/user", tags=["User"])


@router.get(
    "",
    response_model=UserEnvelope,
    summary="현재 로그인한 사용자 정보 반환",
)
async def get_me(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    credentials: CredentialService = Depends(get_credential_service),
) -> UserEnvelope:
    """
    액세스 토큰의 sub 로 사용자 조회
    """
    user = await credentials.get_user(principal.user_id)
    if user is None:
        logger.error("토큰의 사용자(%s) 조회 실패", principal.user_id)
        raise NotFoundError("사용자를 찾을 수 없습니다.")
    return UserEnvelope(user=UserResponse.model_validate(user))
