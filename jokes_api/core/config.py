from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from pathlib import Path
from functools import lru_cache
from typing import List, Optional

# 패키지 루트 디렉토리
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    백엔드 API 환경 설정 모델
    - config/settings.env 파일과 환경 변수를 자동 로드
    - 토큰 서명 비밀키가 없으면 생성 단계에서 실패 (프로세스 기동 불가)
    """
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "config" / "settings.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security & JWT
    ACCESS_TOKEN_SECRET: str = Field(
        ...,
        min_length=1,
        description="액세스 토큰 서명용 비밀키",
    )
    REFRESH_TOKEN_SECRET: str = Field(
        ...,
        min_length=1,
        description="리프레시 토큰 서명용 비밀키 (액세스 키와 별도)",
    )
    JWT_ISSUER: str = Field(
        "remix-jokes",
        description="토큰 발급자(iss) 클레임 값",
    )
    JWT_ACCESS_TOKEN_EXPIRES_MINUTES: int = Field(
        30,
        description="액세스 토큰 만료 시간(분)",
    )
    JWT_REFRESH_TOKEN_EXPIRES_DAYS: int = Field(
        365,
        description="리프레시 토큰 만료 시간(일)",
    )
    BCRYPT_ROUNDS: int = Field(
        12,
        ge=4,
        le=31,
        description="bcrypt 해시 라운드 수",
    )

    # Database
    DB_USER:     Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_HOST:     Optional[str] = None
    DB_PORT:     Optional[int] = None
    DB_NAME:     Optional[str] = None
    DATABASE_URL: Optional[str] = Field(
        None,
        description="전체 DB 연결 URL (우선순위: env > 자동 조합 > 로컬 sqlite)",
    )

    # Revocation Registry (비어 있으면 메모리 기반 레지스트리 사용)
    REDIS_URL: str = Field(
        "",
        description="리프레시 토큰 블랙리스트용 Redis URL",
    )
    REDIS_KEY_PREFIX: str = Field(
        "jokes:refresh_blacklist",
        description="블랙리스트 키 접두어",
    )

    # HTTP
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="허용할 프론트엔드 도메인 목록",
    )
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _assemble_database_url(self) -> "Settings":
        """
        DATABASE_URL이 설정되어 있으면 그대로 사용하고, 없으면 개별 DB 설정값으로 URL을 조합
        - 개별 설정도 없으면 로컬 sqlite 파일 사용
        """
        if self.DATABASE_URL:
            return self
        if self.DB_USER and self.DB_HOST and self.DB_NAME:
            self.DATABASE_URL = (
                f"mysql+asyncmy://{self.DB_USER}:{self.DB_PASSWORD or ''}"
                f"@{self.DB_HOST}:{self.DB_PORT or 3306}/{self.DB_NAME}?charset=utf8mb4"
            )
        else:
            self.DATABASE_URL = f"sqlite+aiosqlite:///{BASE_DIR.parent / 'jokes.db'}"
        return self

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """
        SQLAlchemy가 기대하는 이름의 DB 연결 문자열을 반환
        """
        return self.DATABASE_URL  # 항상 존재함

    @property
    def REFRESH_BLACKLIST_TTL_SECONDS(self) -> int:
        """
        블랙리스트 항목 TTL (리프레시 토큰 수명과 동일)
        """
        return self.JWT_REFRESH_TOKEN_EXPIRES_DAYS * 24 * 60 * 60


@lru_cache()
def get_settings() -> Settings:
    """
    Settings 인스턴스를 싱글톤으로 반환
    최초 호출 시 객체를 생성하고, 이후 캐싱된 인스턴스를 반환
    """
    return Settings()
