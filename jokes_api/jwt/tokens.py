"""
JWT 발급/검증 모듈

액세스 토큰과 리프레시 토큰을 서로 다른 비밀키로 서명
- 액세스 키가 유출되어도 장기 리프레시 토큰은 위조할 수 없음 (반대도 마찬가지)
- 클레임 형태: {sub, iss, aud(=sub), exp, iat, jti, type}
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError, ExpiredSignatureError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class InvalidTokenError(Exception):
    """
    서명/만료/클레임 검증 실패
    - expired: 만료로 인한 실패 여부
    """
    def __init__(self, message: str, expired: bool = False):
        self.message = message
        self.expired = expired
        super().__init__(message)


@dataclass(frozen=True)
class TokenClaims:
    """
    검증된 토큰 클레임
    """
    sub: str
    iss: str
    aud: str
    exp: int
    token_type: str
    jti: str

    @property
    def user_id(self) -> str:
        return self.sub


class TokenCodec:
    """
    단일 비밀키/수명으로 토큰을 서명하고 검증
    """
    def __init__(self, secret: str, issuer: str, lifetime: timedelta, token_type: str):
        if not secret:
            raise ValueError(f"{token_type} 토큰 서명 비밀키가 설정되지 않았습니다.")
        self._secret = secret
        self.issuer = issuer
        self.lifetime = lifetime
        self.token_type = token_type

    def encode(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": user_id,
            "iss": self.issuer,
            "aud": user_id,
            "iat": now,
            "exp": now + self.lifetime,
            "jti": uuid.uuid4().hex,
            "type": self.token_type,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        """
        서명, 만료, 발급자, 토큰 타입, aud == sub 를 모두 검사하여 TokenClaims 반환
        Raises:
            InvalidTokenError: 검증 실패 시
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                # aud 는 토큰마다 사용자 ID 이므로 아래에서 sub 와 직접 비교
                options={"verify_aud": False},
            )
        except ExpiredSignatureError:
            raise InvalidTokenError("토큰이 만료되었습니다.", expired=True)
        except JWTError as e:
            raise InvalidTokenError(f"토큰 검증 실패: {e}")

        sub = payload.get("sub")
        if not sub or payload.get("aud") != sub:
            raise InvalidTokenError("토큰 대상(aud/sub)이 올바르지 않습니다.")
        if payload.get("type") != self.token_type:
            raise InvalidTokenError("토큰 타입이 올바르지 않습니다.")

        return TokenClaims(
            sub=sub,
            iss=payload["iss"],
            aud=payload["aud"],
            exp=int(payload["exp"]),
            token_type=payload["type"],
            jti=str(payload.get("jti", "")),
        )


class TokenIssuer:
    """
    액세스/리프레시 토큰 발급기
    - 두 개의 독립된 TokenCodec 보유
    """
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        issuer: str,
        access_lifetime: timedelta = timedelta(minutes=30),
        refresh_lifetime: timedelta = timedelta(days=365),
    ):
        self.access = TokenCodec(access_secret, issuer, access_lifetime, ACCESS_TOKEN_TYPE)
        self.refresh = TokenCodec(refresh_secret, issuer, refresh_lifetime, REFRESH_TOKEN_TYPE)

    @classmethod
    def from_settings(cls, settings) -> "TokenIssuer":
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            issuer=settings.JWT_ISSUER,
            access_lifetime=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRES_MINUTES),
            refresh_lifetime=timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRES_DAYS),
        )

    def issue_access_token(self, user_id: str) -> str:
        return self.access.encode(user_id)

    def issue_refresh_token(self, user_id: str) -> str:
        return self.refresh.encode(user_id)

    def verify_access_token(self, token: str) -> TokenClaims:
        return self.access.decode(token)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self.refresh.decode(token)
