from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from jokes_api.core.database import get_db_session
from jokes_api.dependencies import (
    AuthenticatedPrincipal, get_current_principal, get_optional_principal
)
from jokes_api.schemas.auth_schema import MessageResponse
from jokes_api.schemas.joke_schema import (
    JokeCreateRequest, JokeEnvelope, JokeListResponse, JokeResponse
)
from jokes_api.services.joke_service import JokeService

router = APIRouter(
    prefix="/jokes",
    tags=["Jokes"],
)


@router.get("", response_model=JokeListResponse)
async def list_jokes(
    db: AsyncSession = Depends(get_db_session),
    principal: Optional[AuthenticatedPrincipal] = Depends(get_optional_principal),
) -> JokeListResponse:
    """
    농담 목록 조회
    - 인증된 요청이면 본인 농담만, 아니면 전체
    """
    jokes = await JokeService(db).list_jokes(principal.user_id if principal else None)
    return JokeListResponse(joke_list_items=[JokeResponse.model_validate(j) for j in jokes])


@router.post("/new", response_model=JokeEnvelope, status_code=status.HTTP_201_CREATED)
async def create_joke(
    req: Optional[JokeCreateRequest] = Body(None),
    db: AsyncSession = Depends(get_db_session),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
) -> JokeEnvelope:
    """
    새로운 농담 생성 (작성자 = 토큰 사용자)
    """
    req = req or JokeCreateRequest()
    joke = await JokeService(db).create_joke(principal.user_id, req.name, req.content)
    return JokeEnvelope(joke=JokeResponse.model_validate(joke))


@router.get("/{joke_id}", response_model=JokeEnvelope)
async def get_joke(
    joke_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> JokeEnvelope:
    joke = await JokeService(db).get_joke(joke_id)
    return JokeEnvelope(joke=JokeResponse.model_validate(joke))


@router.delete("/{joke_id}", response_model=MessageResponse)
async def delete_joke(
    joke_id: str,
    db: AsyncSession = Depends(get_db_session),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
) -> MessageResponse:
    """
    본인이 작성한 농담 삭제
    """
    await JokeService(db).delete_joke(joke_id, principal.user_id)
    return MessageResponse(message="삭제되었습니다.")
