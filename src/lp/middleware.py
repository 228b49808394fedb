"""Custom middleware for request handling."""

import logging
import time
import uuid
from typing import Awaitable, Callable

import jwt
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from lp.auth import caller_from_claims, decode_session_token
from lp.config import get_settings

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve the session token and attach the caller to request state."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Bearer "):
            token = auth.split(" ", 1)[1]
            try:
                claims = decode_session_token(token)
                caller = caller_from_claims(claims)
            except jwt.ExpiredSignatureError:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"error": "Token has expired"},
                )
            except jwt.InvalidTokenError as exc:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"error": f"Invalid token: {exc}"},
                )
            except ValueError as exc:
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"error": f"Invalid token: {exc}"},
                )
            request.state.caller = caller
            request.state.user_id = str(caller.user_id)
        return await call_next(request)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Simple in-memory rate limiting middleware."""

    def __init__(self, app):
        super().__init__(app)
        self.requests = {}
        self.settings = get_settings()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip rate limiting for health checks
        if request.url.path == "/health":
            return await call_next(request)

        # Set by AuthMiddleware; falls back to the client address
        key = getattr(request.state, "user_id", None) or (
            request.client.host if request.client else "anonymous"
        )

        current_time = time.time()
        window_start = current_time - self.settings.rate_limit_window

        # Clean old entries
        self.requests[key] = [
            ts for ts in self.requests.get(key, []) if ts > window_start
        ]

        if len(self.requests[key]) >= self.settings.rate_limit_requests:
            logger.warning("Rate limit exceeded for %s", key)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "error": "Too many requests",
                    "retryAfter": self.settings.rate_limit_window,
                },
            )

        # Record request
        self.requests[key].append(current_time)

        return await call_next(request)
