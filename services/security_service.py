"""
Service-to-service authentication for calls from the upstream product, and the tenant context those calls carry.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass
from hmac import compare_digest
from typing import Any, Optional

import jwt
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from config import HEALTH_PATH, settings

_context_var: ContextVar["CallerContext | None"] = ContextVar("tally_caller_context", default=None)

_OPEN_PATHS = {f"/api/v1{HEALTH_PATH}"}


@dataclass(frozen=True)
class CallerContext:
    tenant_id: str
    user_id: str
    role: str
    permissions: tuple[str, ...] = ()

    def can(self, permission: str) -> bool:
        return permission in self.permissions or self.role == "admin"


def _algorithms() -> list[str]:
    raw = settings.context_algorithms or "HS256"
    return [v.strip() for v in str(raw).split(",") if v.strip()] or ["HS256"]


def _bearer_token(auth_header: str | None) -> str:
    if not auth_header:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authorization header")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authorization header")
    return token.strip()


def decode_context_token(token: str) -> dict[str, Any]:
    key = settings.context_verify_key
    if not key:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Missing context verify key")
    try:
        return jwt.decode(
            token,
            key,
            algorithms=_algorithms(),
            audience=settings.context_audience,
            issuer=settings.context_issuer,
            options={"require": ["exp", "iat", "iss", "aud"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Context token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid context token") from exc


def _caller_from_claims(claims: dict[str, Any]) -> CallerContext:
    tenant_id = str(claims.get("tenant_id", "")).strip()
    if not tenant_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing tenant context")
    return CallerContext(
        tenant_id=tenant_id,
        user_id=str(claims.get("user_id") or claims.get("sub") or ""),
        role=str(claims.get("role", "user")),
        permissions=tuple(claims.get("permissions") or ()),
    )


def set_caller_context(ctx: CallerContext) -> Token:
    return _context_var.set(ctx)


def reset_caller_context(token: Token) -> None:
    _context_var.reset(token)


def get_caller_context() -> CallerContext | None:
    return _context_var.get()


def get_context_tenant(default_tenant: Optional[str] = None) -> str:
    ctx = get_caller_context()
    if ctx:
        return ctx.tenant_id
    if default_tenant:
        return default_tenant
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing tenant context")


def enforce_request_tenant(model: Any) -> Any:
    """Return ``model`` with its tenant replaced by the authenticated one."""
    if model is None:
        return model
    tenant = get_context_tenant(getattr(model, "tenant_id", None) or settings.default_tenant_id)
    return model.model_copy(update={"tenant_id": tenant})


def authenticate_request(request: Request) -> CallerContext:
    expected = settings.expected_service_token
    if not expected:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Missing expected service token")

    provided = request.headers.get("x-service-token", "")
    if not compare_digest(provided, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid service token")

    claims = decode_context_token(_bearer_token(request.headers.get("authorization")))
    return _caller_from_claims(claims)


def requires_auth(path: str) -> bool:
    return path.startswith("/api/v1") and path not in _OPEN_PATHS


class InternalAuthMiddleware:
    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope.get("type") != "http" or not requires_auth(str(scope.get("path", ""))):
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        try:
            ctx = authenticate_request(request)
        except HTTPException as exc:
            response = JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
            await response(scope, receive, send)
            return

        token = set_caller_context(ctx)
        scope.setdefault("state", {})
        scope["state"]["caller_context"] = ctx
        try:
            await self.app(scope, receive, send)
        finally:
            reset_caller_context(token)
