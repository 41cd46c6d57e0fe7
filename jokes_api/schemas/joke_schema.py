from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JokeCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="농담 제목")
    content: Optional[str] = Field(None, description="농담 본문")


class JokeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    jokester_id: str = Field(..., alias="jokesterId")
    name: str
    content: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class JokeEnvelope(BaseModel):
    joke: JokeResponse


class JokeListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    joke_list_items: List[JokeResponse] = Field(..., alias="jokeListItems")
