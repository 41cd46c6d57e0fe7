"""
리프레시 토큰 블랙리스트(Revocation Registry) 모듈

사용자 ID → 마지막으로 로그아웃된 리프레시 토큰 (사용자당 1개 슬롯)
- 로그아웃 시 토큰을 TTL(1년)과 함께 등록하고, 다음 로그인 시 삭제
- 토큰 재발급 시 해당 사용자 항목이 있으면 재발급 거부
- 운영 환경은 Redis, 로컬 개발/테스트는 메모리 구현 사용
- 저장소 오류는 ServiceError 로 올려 재발급/로그아웃을 거부 (fail closed)
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from jokes_api.utils.exceptions import ServiceError

logger = logging.getLogger(__name__)


class RevocationRegistry(ABC):
    """
    블랙리스트 저장소 인터페이스
    """

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        """사용자의 블랙리스트 항목 삭제"""

    @abstractmethod
    async def blacklist(self, user_id: str, refresh_token: str, ttl_seconds: int) -> None:
        """사용자의 블랙리스트 슬롯에 토큰 등록 (기존 항목 덮어씀)"""

    @abstractmethod
    async def is_blacklisted(self, user_id: str) -> Optional[str]:
        """등록된 토큰 문자열 또는 None"""

    async def close(self) -> None:
        return None


class RedisRevocationRegistry(RevocationRegistry):
    """
    Redis 기반 블랙리스트
    - SET key value EX ttl 로 값과 만료를 한 번에 기록
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "jokes:refresh_blacklist"):
        self._redis = redis_client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "jokes:refresh_blacklist") -> "RedisRevocationRegistry":
        return cls(redis.from_url(url, decode_responses=True), key_prefix)

    def _key(self, user_id: str) -> str:
        return f"{self._key_prefix}:{user_id}"

    async def clear(self, user_id: str) -> None:
        try:
            await self._redis.delete(self._key(user_id))
        except RedisError as e:
            logger.error("블랙리스트 삭제 실패 (user=%s): %s", user_id, e)
            raise ServiceError("토큰 저장소에 연결할 수 없습니다.") from e

    async def blacklist(self, user_id: str, refresh_token: str, ttl_seconds: int) -> None:
        try:
            await self._redis.set(self._key(user_id), refresh_token, ex=ttl_seconds)
        except RedisError as e:
            logger.error("블랙리스트 등록 실패 (user=%s): %s", user_id, e)
            raise ServiceError("토큰 저장소에 연결할 수 없습니다.") from e

    async def is_blacklisted(self, user_id: str) -> Optional[str]:
        try:
            value = await self._redis.get(self._key(user_id))
        except RedisError as e:
            logger.error("블랙리스트 조회 실패 (user=%s): %s", user_id, e)
            raise ServiceError("토큰 저장소에 연결할 수 없습니다.") from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def close(self) -> None:
        await self._redis.aclose()


class InMemoryRevocationRegistry(RevocationRegistry):
    """
    서버 메모리 기반 블랙리스트
    - 단일 프로세스 전용, 항목별 만료 시각을 함께 저장
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def clear(self, user_id: str) -> None:
        async with self._lock:
            self._entries.pop(user_id, None)

    async def blacklist(self, user_id: str, refresh_token: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._entries[user_id] = (refresh_token, self._clock() + ttl_seconds)

    async def is_blacklisted(self, user_id: str) -> Optional[str]:
        async with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            token, expires_at = entry
            if self._clock() >= expires_at:
                # 만료된 항목은 조회 시점에 정리
                del self._entries[user_id]
                return None
            return token


def build_revocation_registry(settings) -> RevocationRegistry:
    """
    설정에 따라 블랙리스트 구현 선택
    - REDIS_URL 이 비어 있으면 메모리 구현
    """
    if settings.REDIS_URL:
        logger.info("Redis 블랙리스트 사용")
        return RedisRevocationRegistry.from_url(settings.REDIS_URL, settings.REDIS_KEY_PREFIX)
    logger.warning("REDIS_URL 미설정: 메모리 블랙리스트 사용 (단일 프로세스 전용)")
    return InMemoryRevocationRegistry()
