import logging
from dataclasses import dataclass
from typing import Optional

from jokes_api.jwt.blocklist import RevocationRegistry
from jokes_api.jwt.tokens import InvalidTokenError, TokenIssuer
from jokes_api.models.user import User
from jokes_api.services.credential_service import CredentialService
from jokes_api.utils.exceptions import (
    AuthenticationError, ConflictError, ServiceError, UnauthorizedError, ValidationError
)

logger = logging.getLogger(__name__)

# 클라이언트에는 실패 원인을 구분하지 않는 메시지만 전달
INVALID_CREDENTIALS_MESSAGE = "아이디 또는 비밀번호가 올바르지 않습니다."


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    """
    인증 관련 서비스 클래스
    - 회원가입, 로그인, 토큰 재발급, 로그아웃
    - 요청 간 공유 상태는 블랙리스트 레지스트리뿐
    """
    def __init__(
        self,
        credentials: CredentialService,
        token_issuer: TokenIssuer,
        registry: RevocationRegistry,
        blacklist_ttl_seconds: int = 365 * 24 * 60 * 60,
    ):
        self.credentials = credentials
        self.token_issuer = token_issuer
        self.registry = registry
        self.blacklist_ttl_seconds = blacklist_ttl_seconds

    @staticmethod
    def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
        if not username or not password:
            raise ValidationError("아이디와 비밀번호를 모두 입력해야 합니다.")

    async def register(self, username: Optional[str], password: Optional[str]) -> User:
        """
        회원가입
        - 토큰은 발급하지 않음 (별도 로그인 필요)
        """
        # 1) 필수값 확인
        self._require_credentials(username, password)

        # 2) username 중복 체크 (대소문자 구분)
        if await self.credentials.username_exists(username):
            raise ConflictError("이미 존재하는 사용자입니다.")

        # 3) 해시 후 저장
        user = await self.credentials.create_user(username, password)
        logger.info("회원가입 완료: user=%s", user.id)
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> TokenPair:
        """
        아이디/비밀번호 로그인
        - 성공 시 두 토큰 발급 후 블랙리스트 항목 삭제
        """
        self._require_credentials(username, password)

        user = await self.credentials.find_user(username)
        if user is None:
            logger.warning("로그인 실패 - 존재하지 않는 사용자: %s", username)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        if not await self.credentials.verify_password(password, user.password_hash):
            logger.warning("로그인 실패 - 비밀번호 불일치: user=%s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        try:
            access_token = self.token_issuer.issue_access_token(user.id)
            refresh_token = self.token_issuer.issue_refresh_token(user.id)
        except Exception as e:
            logger.exception("토큰 생성 실패: user=%s", user.id)
            raise ServiceError("토큰을 생성할 수 없습니다.") from e

        # 이전 로그아웃으로 막힌 재발급을 다시 허용
        await self.registry.clear(user.id)
        logger.info("로그인 성공: user=%s", user.id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def refresh(self, refresh_token: Optional[str]) -> TokenPair:
        """
        리프레시 토큰으로 액세스 토큰 재발급
        - 블랙리스트에 해당 사용자 항목이 하나라도 있으면 거부 (제시된 토큰과 무관)
        - 리프레시 토큰은 그대로 돌려줌
        """
        if not refresh_token:
            raise UnauthorizedError("리프레시 토큰이 없습니다.")

        try:
            claims = self.token_issuer.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.warning("리프레시 토큰 검증 실패: %s", e.message)
            raise AuthenticationError(e.message)

        if await self.registry.is_blacklisted(claims.user_id) is not None:
            logger.warning("블랙리스트 사용자 재발급 거부: user=%s", claims.user_id)
            raise AuthenticationError("다시 로그인해 주세요.")

        access_token = self.token_issuer.issue_access_token(claims.user_id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def logout(self, refresh_token: Optional[str]) -> None:
        """
        로그아웃 + 리프레시 토큰 블랙리스트 등록 (TTL = 리프레시 토큰 수명)
        """
        if not refresh_token:
            raise UnauthorizedError("리프레시 토큰이 없습니다.")

        try:
            claims = self.token_issuer.verify_refresh_token(refresh_token)
        except InvalidTokenError as e:
            logger.warning("로그아웃 토큰 검증 실패: %s", e.message)
            raise AuthenticationError(e.message)

        await self.registry.blacklist(claims.user_id, refresh_token, self.blacklist_ttl_seconds)
        logger.info("로그아웃 완료: user=%s", claims.user_id)
