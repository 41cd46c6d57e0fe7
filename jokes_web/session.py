"""
암호화 쿠키 세션 저장소

세션 내용(JSON)을 Fernet 으로 암호화하여 단일 쿠키에 저장
- 변조되었거나 max-age 가 지난 쿠키는 빈 세션으로 취급
"""

import base64
import hashlib
import json
import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken
from starlette.responses import Response

logger = logging.getLogger(__name__)


def _derive_key(secret: str) -> bytes:
    """
    임의 길이 비밀키 → Fernet 32바이트 키
    """
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class Session:
    """
    요청 단위 세션 데이터
    - modified: 응답에 쿠키를 다시 써야 하는지
    - destroyed: 쿠키 삭제가 이미 결정되었는지
    """
    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})
        self.modified = False
        self.destroyed = False

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def clear(self) -> None:
        self._data.clear()
        self.modified = True

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SessionStorage:
    def __init__(
        self,
        secret: str,
        cookie_name: str = "RJ_auth_session",
        max_age: int = int(timedelta(days=365).total_seconds()),
        secure: bool = False,
        path: str = "/",
    ):
        if not secret:
            raise ValueError("SESSION_SECRET must be set")
        self._fernet = Fernet(_derive_key(secret))
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self.path = path

    def get_session(self, cookie_value: Optional[str]) -> Session:
        if not cookie_value:
            return Session()
        padded = cookie_value + "=" * (-len(cookie_value) % 4)
        try:
            raw = self._fernet.decrypt(padded.encode("ascii"), ttl=self.max_age)
            data = json.loads(raw)
        except (InvalidToken, UnicodeEncodeError, ValueError):
            logger.warning("세션 쿠키 복호화 실패: 빈 세션으로 대체")
            return Session()
        if not isinstance(data, dict):
            return Session()
        return Session(data)

    def commit_session(self, session: Session) -> str:
        """
        세션을 암호화하여 Set-Cookie 헤더 값으로 직렬화
        """
        token = self._fernet.encrypt(json.dumps(session.to_dict()).encode("utf-8"))
        # base64 패딩('=')은 쿠키 값에서 따옴표 처리되므로 제거하고 읽을 때 복원
        value = token.decode("ascii").rstrip("=")
        session.modified = False
        response = Response()
        response.set_cookie(
            key=self.cookie_name,
            value=value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )
        return response.headers["set-cookie"]

    def destroy_session(self, session: Session) -> str:
        """
        세션을 비우고 쿠키를 만료시키는 Set-Cookie 헤더 값 반환
        """
        session.clear()
        session.modified = False
        session.destroyed = True
        response = Response()
        response.delete_cookie(
            key=self.cookie_name,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )
        return response.headers["set-cookie"]
