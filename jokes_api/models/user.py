import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from jokes_api.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# MySQL 기본 콜레이션(utf8mb4_unicode_ci)은 대소문자를 무시하므로 바이너리 비교로 고정
UsernameType = String(120).with_variant(String(120, collation="utf8mb4_bin"), "mysql")


class User(Base):
    """
    서비스 사용자(User) 모델
    - 가입 시 생성되고 로그인 시 조회만 되는 불변 레코드
    - 작성한 농담(Joke)과의 관계 관리
    """
    __tablename__ = "user"

    id: str = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        doc="사용자 고유 ID (UUID 문자열)"
    )
    username: str = Column(
        UsernameType,
        unique=True,
        nullable=False,
        index=True,
        doc="로그인 ID (대소문자 구분)"
    )
    password_hash: str = Column(
        String(255),
        nullable=False,
        doc="해시 처리된 비밀번호"
    )
    created_at: datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        doc="가입 시각"
    )
    updated_at: datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        doc="수정 시각"
    )

    # User ↔ Joke (1:N)
    jokes = relationship(
        "Joke",
        back_populates="jokester",
        cascade="all, delete-orphan",  # 사용자 삭제 시 농담도 삭제
        lazy="selectin",
        doc="이 사용자가 작성한 농담 목록"
    )
