"""
Request pipeline applied by every API route.

Order: rate limit, authentication, then the route operation (validation and
store access). Every failure is raised as an AppError (or escapes as any other
exception) and is converted to a response once, here.
"""
import json
import sqlite3
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from src.shared.errors import (
    AppError,
    AppErrors,
    DatabaseError,
    RateLimitError,
    UnauthorizedError,
    ValidationError,
    classify_error,
    error_body,
)
from src.shared.logging_config import log_error, log_request
from src.web.auth import PrincipalResolver
from src.web.rate_limit import RateLimiter


@dataclass
class RequestContext:
    """Per-request facts carried into logs."""
    method: str
    endpoint: str
    ip: str
    started: float = field(default_factory=time.perf_counter)
    user_id: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def elapsed_ms(self) -> float:
        return round((time.perf_counter() - self.started) * 1000, 2)


Operation = Callable[[RequestContext], Awaitable[Union[dict, Response]]]


def client_ip(request: Request) -> str:
    """Caller address: first X-Forwarded-For hop, X-Real-IP, socket peer, else 'unknown'."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@contextmanager
def store_call():
    """Convert driver failures into DatabaseError, keeping the cause chained."""
    try:
        yield
    except sqlite3.Error as e:
        raise DatabaseError() from e


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant {name}")


async def read_json(request: Request) -> Any:
    """Parse the body as strict JSON: NaN and Infinity are not accepted."""
    body = await request.body()
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationError(AppErrors.INVALID_JSON) from e


def error_response(error: AppError) -> JSONResponse:
    headers = {}
    if isinstance(error, RateLimitError) and error.retry_after is not None:
        headers["Retry-After"] = str(error.retry_after)
    return JSONResponse(error_body(error), status_code=error.status_code, headers=headers)


class RequestPipeline:
    """Rate limit, authenticate, run, respond and log."""

    def __init__(
        self,
        limiter: RateLimiter,
        resolver: PrincipalResolver,
        limit: int,
        window_ms: int,
    ):
        self.limiter = limiter
        self.resolver = resolver
        self.limit = limit
        self.window_ms = window_ms

    def _check_rate_limit(self, ctx: RequestContext) -> None:
        decision = self.limiter.check(f"{ctx.method}:{ctx.ip}", self.limit, self.window_ms)
        if not decision.admitted:
            raise RateLimitError(retry_after=decision.retry_after_s)

    async def _authenticate(self, request: Request) -> str:
        user_id = await self.resolver.resolve(request)
        if not user_id:
            raise UnauthorizedError()
        return user_id

    async def run(
        self,
        request: Request,
        endpoint: str,
        operation: Operation,
        require_auth: bool = True,
        status_code: int = 200,
    ) -> Response:
        """
        Execute one API call.

        Args:
            endpoint: route label used in logs
            operation: validates input and talks to the store; returns the
                success payload (wrapped as {"success": True, ...}) or a
                ready-made Response
            require_auth: False only for public endpoints
            status_code: status for a dict payload
        """
        ctx = RequestContext(method=request.method, endpoint=endpoint, ip=client_ip(request))
        try:
            self._check_rate_limit(ctx)
            if require_auth:
                ctx.user_id = await self._authenticate(request)
            result = await operation(ctx)
            if isinstance(result, Response):
                response = result
            else:
                # JSONResponse serializes on construction
                response = JSONResponse({"success": True, **result}, status_code=status_code)
        except Exception as exc:
            error = classify_error(exc)
            log_error(
                error, ctx.method, ctx.endpoint, ctx.user_id, error.status_code,
                code=error.code, ip=ctx.ip, duration=ctx.elapsed_ms(), **ctx.extra,
            )
            return error_response(error)

        log_request(
            ctx.method, ctx.endpoint, ctx.user_id, response.status_code, ctx.elapsed_ms(),
            ip=ctx.ip, **ctx.extra,
        )
        return response
