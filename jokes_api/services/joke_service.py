import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.models.joke import Joke
from jokes_api.repositories.joke_repository import JokeRepository
from jokes_api.utils.exceptions import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class JokeService:
    """
    농담 생성/조회/삭제 서비스
    """
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = JokeRepository(db)

    async def create_joke(self, jokester_id: str, name: Optional[str], content: Optional[str]) -> Joke:
        if not name or not content:
            raise ValidationError("제목과 내용을 모두 입력해야 합니다.")
        joke = Joke(jokester_id=jokester_id, name=name, content=content)
        await self.repo.add_joke(joke)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("농담 생성: joke=%s user=%s", joke.id, jokester_id)
        return joke

    async def get_joke(self, joke_id: str) -> Joke:
        joke = await self.repo.find_by_id(joke_id)
        if joke is None:
            raise NotFoundError(f"농담 ID {joke_id}를 찾을 수 없습니다.")
        return joke

    async def list_jokes(self, jokester_id: Optional[str] = None) -> List[Joke]:
        """
        작성자가 주어지면 해당 사용자의 농담만, 아니면 전체 반환
        """
        if jokester_id:
            return await self.repo.list_by_jokester(jokester_id)
        return await self.repo.list_all()

    async def delete_joke(self, joke_id: str, requester_id: str) -> None:
        """
        작성자 본인만 삭제 가능
        """
        joke = await self.get_joke(joke_id)
        if joke.jokester_id != requester_id:
            raise ForbiddenError("본인이 작성한 농담만 삭제할 수 있습니다.")
        await self.repo.delete_joke(joke)
        await self.db.commit()
        logger.info("농담 삭제: joke=%s user=%s", joke_id, requester_id)
