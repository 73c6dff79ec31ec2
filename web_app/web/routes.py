"""Web interface routes implementation."""

import os
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from linkstash.common.url_builder import build_short_url, page_to_offset, total_pages
from linkstash.common.validators import validate_page_request
from linkstash.errors import InvalidCredentialsError, MappingNotFoundError

from ..api.schemas import AdminMappingPageResponse, MappingResponse, MockDataResponse, ShortenResponse
from ..auth import (
    clear_session_cookie,
    get_session_token,
    refresh_session_cookie,
    set_session_cookie,
)

router = APIRouter()

# Redirect route lives on its own router so it can be mounted under config.path_prefix
redirect_router = APIRouter()

template_dir = os.path.join(os.path.dirname(__file__), "..", "..", "ux", "web")
templates = Jinja2Templates(directory=template_dir)


def _error_page(request: Request, message: str, status_code: int) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error_message": message},
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the homepage with the shorten form."""
    return templates.TemplateResponse(request, "index.html", {})


@router.post("/shorten", include_in_schema=False)
async def shorten_web(request: Request, url: str = Form("")):
    """Handle the shorten form; answers JSON for the page script."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        result = await service.shorten(url.strip())
    except ValueError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)

    body = ShortenResponse(
        short_identifier=result.identifier,
        short_url=build_short_url(result.identifier, config.base_url, config.path_prefix),
        original_url=result.original_url,
    )
    return JSONResponse(body.model_dump())


@router.get("/admin", response_class=HTMLResponse, include_in_schema=False)
async def admin_page(
    request: Request,
    error: Optional[str] = None,
    token: Optional[str] = Depends(get_session_token),
):
    """Login form, or the mappings dashboard for a live session."""
    service = request.app.state.service
    config = request.app.state.config

    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "is_authenticated": service.is_authenticated(token),
            "error": error == "1",
            "page_size": config.default_page_size,
            "max_mock_data_count": config.max_mock_data_count,
        },
    )


@router.get("/login", include_in_schema=False)
async def login_get():
    return RedirectResponse(url="/admin", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/login", include_in_schema=False)
async def login_web(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
):
    """Check the admin credentials and set the session cookie."""
    service = request.app.state.service
    config = request.app.state.config

    try:
        session = service.login(username, password)
    except InvalidCredentialsError:
        return RedirectResponse(url="/admin?error=1", status_code=status.HTTP_303_SEE_OTHER)

    response = RedirectResponse(url="/admin", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, config, session.token)
    return response


@router.api_route("/logout", methods=["GET", "POST"], include_in_schema=False)
async def logout_web(request: Request, token: Optional[str] = Depends(get_session_token)):
    """Revoke the session and expire the cookie."""
    request.app.state.service.logout(token)

    response = RedirectResponse(url="/admin", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response, request.app.state.config)
    return response


@router.get("/count", response_class=PlainTextResponse, include_in_schema=False)
async def count_web(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(get_session_token),
):
    """Plain-text mapping count for an admin session."""
    total = await request.app.state.service.count_mappings(token)
    refresh_session_cookie(request, response, request.app.state.config, token)
    return f"Total URLs stored: {total}\n"


@router.get("/mappings-api", response_model=AdminMappingPageResponse, include_in_schema=False)
async def mappings_api(
    request: Request,
    response: Response,
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    token: Optional[str] = Depends(get_session_token),
):
    """Page of mappings for the admin dashboard script."""
    service = request.app.state.service
    config = request.app.state.config

    page_size = page_size or config.default_page_size
    is_valid, error = validate_page_request(page, page_size, config.max_page_size)
    if not is_valid:
        return JSONResponse({"error": error}, status_code=status.HTTP_400_BAD_REQUEST)

    result = await service.list_mappings(token, page_to_offset(page, page_size), page_size)
    refresh_session_cookie(request, response, config, token)

    return AdminMappingPageResponse(
        mappings=[
            MappingResponse.from_entry(
                entry, build_short_url(entry.identifier, config.base_url, config.path_prefix)
            )
            for entry in result.entries
        ],
        total_count=result.total_count,
        page=page,
        page_size=page_size,
        total_pages=total_pages(result.total_count, page_size),
    )


@router.post("/admin/mock-data", response_model=MockDataResponse, include_in_schema=False)
async def mock_data_web(
    request: Request,
    response: Response,
    count: int = Form(10),
    token: Optional[str] = Depends(get_session_token),
):
    """Inject synthetic mappings from the admin dashboard."""
    service = request.app.state.service

    try:
        report = await service.generate_mock_data(token, count)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=status.HTTP_400_BAD_REQUEST)

    refresh_session_cookie(request, response, request.app.state.config, token)
    return MockDataResponse(**report.to_dict())


@redirect_router.get("/{identifier}", include_in_schema=False)
async def redirect_to_url(request: Request, identifier: str):
    """Redirect to the original URL, recording the visit."""
    service = request.app.state.service

    if not service.store.generator.is_valid_format(identifier):
        return _error_page(request, f"Short URL '{identifier}' not found", status.HTTP_404_NOT_FOUND)

    try:
        original_url = await service.resolve(identifier, request.headers.get("user-agent"))
    except MappingNotFoundError:
        return _error_page(request, f"Short URL '{identifier}' not found", status.HTTP_404_NOT_FOUND)

    # 302 so every visit reaches the server and is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
