from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path
from functools import lru_cache

# 패키지 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent


class WebSettings(BaseSettings):
    """
    프론트엔드 환경 설정 모델
    - SESSION_SECRET, ACCESS_TOKEN_SECRET 누락 시 기동 실패
    """
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "config" / "settings.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SESSION_SECRET: str = Field(..., min_length=1, description="세션 쿠키 암호화 비밀키")
    ACCESS_TOKEN_SECRET: str = Field(..., min_length=1, description="액세스 토큰 검증용 비밀키")
    JWT_ISSUER: str = "remix-jokes"

    SESSION_COOKIE_NAME: str = "RJ_auth_session"
    SESSION_MAX_AGE_DAYS: int = 365

    API_URL: str = Field("http://localhost:8000", description="백엔드 API 주소")
    API_TIMEOUT_SECONDS: float = Field(10.0, gt=0, description="백엔드 호출 타임아웃(초)")

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    @property
    def cookie_secure(self) -> bool:
        """
        운영 환경에서만 Secure 쿠키 (localhost Safari 호환)
        """
        return self.ENVIRONMENT == "production"

    @property
    def session_max_age_seconds(self) -> int:
        return self.SESSION_MAX_AGE_DAYS * 24 * 60 * 60


@lru_cache()
def get_web_settings() -> WebSettings:
    return WebSettings()
