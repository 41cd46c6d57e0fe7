import asyncio
import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.models.user import User
from jokes_api.repositories.user_repository import UserRepository
from jokes_api.utils.exceptions import BadRequestError, ConflictError

logger = logging.getLogger(__name__)


def build_password_context(rounds: int = 12) -> CryptContext:
    """
    bcrypt 해시 컨텍스트 생성
    """
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class CredentialService:
    """
    자격 증명 저장소 어댑터
    - 사용자 조회/생성, 비밀번호 해시/검증
    - bcrypt 연산은 이벤트 루프를 막지 않도록 워커 스레드에서 실행
    """
    def __init__(self, db: AsyncSession, pwd_context: CryptContext):
        self.db = db
        self.user_repo = UserRepository(db)
        self.pwd_context = pwd_context

    async def find_user(self, username: str) -> Optional[User]:
        return await self.user_repo.find_by_username(username)

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.user_repo.find_by_id(user_id)

    async def username_exists(self, username: str) -> bool:
        return await self.user_repo.find_by_username(username) is not None

    async def hash_password(self, password: str) -> str:
        return await asyncio.to_thread(self.pwd_context.hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.pwd_context.verify, password, password_hash)

    async def create_user(self, username: str, password: str) -> User:
        """
        비밀번호를 해시하여 User 생성 후 커밋
        Raises:
            ConflictError: 동시 가입으로 username 유니크 제약 위반 시
            BadRequestError: 그 외 저장 실패 시
        """
        user = User(username=username, password_hash=await self.hash_password(password))
        await self.user_repo.create_user(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("이미 존재하는 사용자입니다.")
        except SQLAlchemyError as e:
            logger.error("회원가입 커밋 실패: %s", e)
            await self.db.rollback()
            raise BadRequestError("사용자 생성 중 오류가 발생했습니다.")
        return user
