"""Session token transport: cookie for the browser, bearer header for API clients."""

from typing import Optional

from fastapi import Request, Response


def get_session_token(request: Request) -> Optional[str]:
    """Session token from ``Authorization: Bearer`` or the session cookie."""
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(request.app.state.config.session_cookie_name)


def set_session_cookie(response: Response, config, token: str) -> None:
    """Issue (or refresh) the session cookie for another full TTL."""
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=config.session_ttl_seconds,
        path="/",
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, config) -> None:
    response.delete_cookie(key=config.session_cookie_name, path="/", httponly=True, samesite="lax")


def refresh_session_cookie(request: Request, response: Response, config, token: str) -> None:
    """Extend the cookie after a renewed session, when the token came from it.

    Bearer-authenticated callers never get a cookie they did not send.
    """
    if request.cookies.get(config.session_cookie_name) == token:
        set_session_cookie(response, config, token)
