from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.models.user import User


class UserRepository:
    """
    사용자 관련 데이터 액세스 담당 Repository 클래스
    - User 엔티티 조회 및 생성 기능 제공
    """
    def __init__(self, session: AsyncSession):
        """
        session: 비동기 SQLAlchemy 세션
        """
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        """
        주어진 username과 정확히 일치하는 User 객체 반환
        """
        query = select(User).where(User.username == username)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """
        주어진 id의 User 객체 반환
        """
        return await self.session.get(User, user_id)

    async def create_user(self, user: User) -> None:
        """
        새 User 엔티티를 세션에 추가
        """
        self.session.add(user)
