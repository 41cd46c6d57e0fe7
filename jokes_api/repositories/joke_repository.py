from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.models.joke import Joke


class JokeRepository:
    """
    농담 데이터 액세스 객체(Repository)
    - Joke 엔티티 생성/조회/삭제 기능 제공
    """
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_joke(self, joke: Joke) -> None:
        self.session.add(joke)

    async def find_by_id(self, joke_id: str) -> Optional[Joke]:
        return await self.session.get(Joke, joke_id)

    async def list_all(self) -> List[Joke]:
        """
        전체 농담 목록 (최신순)
        """
        query = select(Joke).order_by(Joke.created_at.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_jokester(self, jokester_id: str) -> List[Joke]:
        """
        주어진 작성자의 농담 목록 (최신순)
        """
        query = (
            select(Joke)
            .where(Joke.jokester_id == jokester_id)
            .order_by(Joke.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_joke(self, joke: Joke) -> None:
        await self.session.delete(joke)
