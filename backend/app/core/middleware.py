"""
Coarse navigation gate for page (non-API) requests.

It only checks that the auth cookie is present and longer than
``TOKEN_MIN_LENGTH``, then lets the SPA load; the full token verification
happens on every API call through ``app.api.deps``.
"""
from fastapi import Request
from fastapi.responses import RedirectResponse
from app.core.config import settings

LOGIN_PATH = "/login"
PUBLIC_PATHS = {LOGIN_PATH, "/health", "/favicon.ico"}
PUBLIC_PREFIXES = ("/assets", "/docs", "/redoc", "/openapi.json")


def is_gated_path(path: str) -> bool:
    if path.startswith(settings.API_STR):
        return False
    if path in PUBLIC_PATHS:
        return False
    return not path.startswith(PUBLIC_PREFIXES)


async def page_gate(request: Request, call_next):
    if not is_gated_path(request.url.path):
        return await call_next(request)

    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        return RedirectResponse(LOGIN_PATH, status_code=307)

    if len(token) <= settings.TOKEN_MIN_LENGTH:
        # Too short to be a token, drop it so the login page starts clean
        response = RedirectResponse(LOGIN_PATH, status_code=307)
        response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
        return response

    return await call_next(request)
