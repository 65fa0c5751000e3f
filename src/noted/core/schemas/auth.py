"""
Authentication schemas.

Users sign in with the Telegram login widget; the widget payload is posted
as-is and exchanged for a JWT access token.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramLoginRequest(BaseModel):
    """Payload produced by the Telegram login widget."""

    id: int = Field(description="Telegram user id")
    auth_date: int = Field(description="Unix time of the login")
    hash: str = Field(description="HMAC-SHA256 of the other fields")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": 42,
                "first_name": "Ada",
                "username": "ada",
                "auth_date": 1760000000,
                "hash": "3f1c...",
            }
        },
    )

    def fields(self) -> Dict[str, Any]:
        """Every submitted field except None values, as sent by the widget."""
        return self.model_dump(exclude_none=True)


class UserResponse(BaseModel):
    id: uuid.UUID
    telegram_id: int
    display_name: str
    created_at: datetime


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token expiration time in seconds")
    user: UserResponse = Field(description="User information")
