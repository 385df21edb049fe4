"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten one or more URLs."""

    urls: str = Field(..., description="Destination URLs separated by newlines and/or commas")
    password: Optional[str] = Field(None, description="Optional password appended to every key")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "urls": "example.com\nhttps://github.com/user/repo",
                    "password": None
                },
                {
                    "urls": "https://example.org/private",
                    "password": "abc"
                }
            ]
        }
    }


class ShortenItem(BaseModel):
    """One shortened URL. The key never carries the password suffix."""

    key: str = Field(..., description="Bare short key")
    url: str = Field(..., description="Destination URL as submitted")


class UnlockRequest(BaseModel):
    """Request to open a password-protected key."""

    key: str = Field(..., min_length=1, description="Bare short key")
    password: str = Field(..., min_length=1, description="Password token")


class UnlockResponse(BaseModel):
    """Destination of an unlocked key."""

    key: str
    url: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="healthy, or degraded when the remote store is down")
    memory_keys: int = Field(..., description="Keys held in the memory tier")
    seed_keys: int = Field(..., description="Keys held in the static seed tier")
    remote: str = Field(..., description="Remote store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
