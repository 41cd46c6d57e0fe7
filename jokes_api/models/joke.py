import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from jokes_api.core.database import Base
from jokes_api.models.user import _utcnow


class Joke(Base):
    """
    농담(Joke) 모델
    - 제목, 본문, 작성자
    """
    __tablename__ = "joke"

    id: str = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        doc="농담 고유 ID"
    )
    jokester_id: str = Column(
        String(36),
        ForeignKey(
            "user.id",
            ondelete="CASCADE"  # 작성자 삭제 시 농담도 함께 삭제
        ),
        nullable=False,
        index=True,
        doc="작성자 User ID"
    )
    name: str = Column(
        String(255),
        nullable=False,
        doc="농담 제목"
    )
    content: str = Column(
        Text,
        nullable=False,
        doc="농담 본문"
    )
    created_at: datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        doc="작성 시각"
    )
    updated_at: datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        doc="수정 시각"
    )

    jokester = relationship(
        "User",
        back_populates="jokes",
        lazy="selectin",
        doc="작성자 User 객체"
    )
