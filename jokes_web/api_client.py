import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from jokes_web.exceptions import ApiRequestError, AuthenticationError, LogoutRequired
from jokes_web.relay import SessionRelay

logger = logging.getLogger(__name__)


class JokesApiClient:
    """
    백엔드 농담 API 래퍼
    - 인증이 필요한 호출은 401 수신 시 한 번만 재발급 후 재시도
    - 재시도 후에도 실패하거나 연결 오류면 LogoutRequired
    """
    MAX_ATTEMPTS = 2

    def __init__(self, http: httpx.AsyncClient, relay: SessionRelay):
        self.http = http
        self.relay = relay

    async def _authorized_request(
        self,
        request: Request,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            access_token = self.relay.get_access_token(request)
            if not access_token:
                raise LogoutRequired("로그인이 필요합니다.")

            try:
                response = await self.http.request(
                    method,
                    path,
                    json=json,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
            except httpx.HTTPError as e:
                logger.warning("API 호출 실패 (%s %s): %s", method, path, e)
                raise LogoutRequired("API 서버에 연결할 수 없습니다.") from e

            if response.status_code != 401:
                return response
            if attempt == self.MAX_ATTEMPTS:
                break

            # 액세스 토큰 만료: 한 번만 재발급 후 재시도
            try:
                await self.relay.refresh_access_token(request)
            except AuthenticationError as e:
                raise LogoutRequired(e.message) from e

        logger.info("재발급 후에도 인증 실패 (%s %s)", method, path)
        raise LogoutRequired("인증이 만료되었습니다. 다시 로그인해 주세요.")

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            message = response.json().get("detail", response.reason_phrase)
        except ValueError:
            message = response.reason_phrase
        raise ApiRequestError(response.status_code, str(message))

    async def get_all_jokes(self) -> List[Dict[str, Any]]:
        try:
            response = await self.http.get("/jokes")
            response.raise_for_status()
            return response.json()["jokeListItems"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("get_all_jokes error: %s", e)
            return []

    async def get_joke(self, joke_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = await self.http.get(f"/jokes/{joke_id}")
        except httpx.HTTPError as e:
            logger.error("get_joke error: %s", e)
            return None
        if response.status_code != 200:
            return None
        return response.json().get("joke")

    async def get_users_jokes(self, request: Request) -> List[Dict[str, Any]]:
        response = await self._authorized_request(request, "GET", "/jokes")
        self._raise_for_status(response)
        return response.json()["jokeListItems"]

    async def create_joke(self, request: Request, name: str, content: str) -> Dict[str, Any]:
        response = await self._authorized_request(
            request, "POST", "/jokes/new", json={"name": name, "content": content}
        )
        self._raise_for_status(response)
        return response.json()["joke"]

    async def delete_joke(self, request: Request, joke_id: str) -> None:
        response = await self._authorized_request(request, "DELETE", f"/jokes/{joke_id}")
        self._raise_for_status(response)

    async def get_user(self, request: Request) -> Optional[Dict[str, Any]]:
        """
        로그인한 사용자 정보 (세션이 없으면 None)
        - 토큰은 유효하지만 사용자를 조회할 수 없으면 세션을 버리고 다시 로그인
        """
        if not self.relay.get_access_token(request):
            return None
        response = await self._authorized_request(request, "GET", "/user")
        try:
            self._raise_for_status(response)
        except ApiRequestError as e:
            logger.warning("사용자 조회 실패: status=%s", e.status_code)
            raise LogoutRequired(e.message) from e
        return response.json()["user"]
