"""
HTTP hardening: response security headers and the JSON-only body rule.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.settings import settings


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

HSTS = "max-age=31536000; includeSubDomains"

# Responses here carry tokens or invitation details
NO_STORE_PREFIXES = ("/api/auth", "/api/invitations")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Stamp ``SECURITY_HEADERS`` on every response. Auth and invitation
    responses are also marked ``Cache-Control: no-store``; HSTS is only sent
    in production.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers["Cache-Control"] = "no-store"
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS
        return response


def _is_json(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json"


class ContentTypeValidationMiddleware(BaseHTTPMiddleware):
    """
    Reject POST/PUT/PATCH bodies declared as anything but JSON with 415.
    Requests that declare no content type (bodyless actions such as
    ``/cancel``) pass through.
    """

    async def dispatch(self, request: Request, call_next):
        content_type = request.headers.get("content-type")
        if request.method in ("POST", "PUT", "PATCH") and content_type and not _is_json(content_type):
            return JSONResponse(
                status_code=415,
                content={"detail": "Unsupported Media Type. Use application/json"},
            )
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    # Last added runs first: the content check answers before headers are stamped
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ContentTypeValidationMiddleware)
