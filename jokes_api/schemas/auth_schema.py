from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ConfigDict

# ─── 인증 관련 요청/응답 스키마 정의 ─────────────────────────────────────
# 필수값 누락은 서비스 계층에서 ValidationError 로 처리하므로 모두 Optional


class CredentialsRequest(BaseModel):
    """
    회원가입/로그인 요청 모델
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "username": "alice",
                "password": "securepassword",
            }
        },
    )

    username: Optional[str] = Field(None, description="로그인 ID")
    password: Optional[str] = Field(None, description="비밀번호")


class RefreshTokenRequest(BaseModel):
    """
    토큰 재발급/로그아웃 요청 모델
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    refresh_token: Optional[str] = Field(
        None, alias="refreshToken", description="Refresh Token"
    )


class TokenResponse(BaseModel):
    """
    인증 토큰 응답 모델
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refreshToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "tokenType": "bearer"
            }
        },
    )

    access_token: str = Field(..., alias="accessToken", description="Access Token")
    refresh_token: str = Field(..., alias="refreshToken", description="Refresh Token")
    token_type: str = Field(default="bearer", alias="tokenType", description="토큰 타입 (기본 bearer)")


class UserResponse(BaseModel):
    """
    사용자 정보 응답 모델 (비밀번호 해시 제외)
    """
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    username: str
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class UserEnvelope(BaseModel):
    user: UserResponse


class MessageResponse(BaseModel):
    """
    단순 메시지 응답 모델
    - API 처리 결과를 간단한 메시지로 반환할 때 사용
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {"message": "Operation successful"}
        },
    )

    message: str = Field(..., description="응답 메시지")
