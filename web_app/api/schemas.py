"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from linkstash.database.models import MappingEntry


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1, max_length=2048)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_identifier: str = Field(..., description="The 8-character hex identifier")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_identifier": "3f9a0c1b",
                    "short_url": "http://localhost:8080/s/3f9a0c1b",
                    "original_url": "https://example.com/very/long/path",
                }
            ]
        }
    }


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    """Session issued to an administrator."""

    token: str = Field(..., description="Session token; send as 'Authorization: Bearer <token>'")
    expires_at: datetime = Field(..., description="Expiry if the session stays idle")


class MappingResponse(BaseModel):
    """One stored mapping with its visit analytics."""

    short_identifier: str
    short_url: str
    original_url: str
    count: int
    device: Optional[str] = None
    os: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: MappingEntry, short_url: str) -> "MappingResponse":
        return cls(
            short_identifier=entry.identifier,
            short_url=short_url,
            original_url=entry.record.original_url,
            count=entry.record.count,
            device=entry.record.device,
            os=entry.record.os,
        )


class MappingPageResponse(BaseModel):
    """Offset-based page of mappings."""

    mappings: List[MappingResponse]
    total_count: int
    offset: int
    limit: int


class AdminMappingPageResponse(BaseModel):
    """Page-number based page of mappings for the admin dashboard."""

    mappings: List[MappingResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class CountResponse(BaseModel):
    total_count: int


class MockDataRequest(BaseModel):
    count: int = Field(10, ge=1, description="Number of synthetic mappings to create")


class MockDataFailure(BaseModel):
    url: str
    error: str


class MockDataResponse(BaseModel):
    """Outcome of a mock data batch."""

    requested: int
    created: List[str]
    failed: List[MockDataFailure]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
