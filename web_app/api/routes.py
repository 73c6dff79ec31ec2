"""API routes implementation."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from linkstash.common.url_builder import build_short_url
from linkstash.errors import InvalidCredentialsError

from ..auth import get_session_token
from .schemas import (
    CountResponse,
    ErrorResponse,
    HealthResponse,
    LoginRequest,
    LoginResponse,
    MappingPageResponse,
    MappingResponse,
    MockDataRequest,
    MockDataResponse,
    ShortenRequest,
    ShortenResponse,
)

router = APIRouter()


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Create short URL",
    description="Shorten a URL. The same URL always maps to the same identifier.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        result = await service.shorten(body.url)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ShortenResponse(
        short_identifier=result.identifier,
        short_url=build_short_url(result.identifier, config.base_url, config.path_prefix),
        original_url=result.original_url,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Start admin session",
)
async def login(request: Request, body: LoginRequest):
    """Exchange the admin credentials for a session token."""
    service = request.app.state.service

    try:
        session = service.login(body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    return LoginResponse(token=session.token, expires_at=session.expires_at)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End admin session",
)
async def logout(request: Request, token: Optional[str] = Depends(get_session_token)):
    """Revoke the caller's session. Unknown tokens are ignored."""
    request.app.state.service.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/mappings",
    response_model=MappingPageResponse,
    responses={401: {"model": ErrorResponse, "description": "Session missing or expired"}},
    summary="List mappings",
    description="Page through all mappings in identifier order. Requires an admin session.",
)
async def list_mappings(
    request: Request,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    token: Optional[str] = Depends(get_session_token),
):
    service = request.app.state.service
    config = request.app.state.config

    limit = min(limit or config.default_page_size, config.max_page_size)
    page = await service.list_mappings(token, offset, limit)

    return MappingPageResponse(
        mappings=[
            MappingResponse.from_entry(
                entry, build_short_url(entry.identifier, config.base_url, config.path_prefix)
            )
            for entry in page.entries
        ],
        total_count=page.total_count,
        offset=page.offset,
        limit=page.limit,
    )


@router.get(
    "/count",
    response_model=CountResponse,
    responses={401: {"model": ErrorResponse, "description": "Session missing or expired"}},
    summary="Count mappings",
)
async def count_mappings(request: Request, token: Optional[str] = Depends(get_session_token)):
    total = await request.app.state.service.count_mappings(token)
    return CountResponse(total_count=total)


@router.post(
    "/mock-data",
    response_model=MockDataResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Batch size out of range"},
        401: {"model": ErrorResponse, "description": "Session missing or expired"},
    },
    summary="Inject synthetic mappings",
    description="Create synthetic mappings with simulated visits. Failures are reported per item.",
)
async def mock_data(
    request: Request,
    body: MockDataRequest,
    token: Optional[str] = Depends(get_session_token),
):
    service = request.app.state.service

    try:
        report = await service.generate_mock_data(token, body.count)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MockDataResponse(**report.to_dict())


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
