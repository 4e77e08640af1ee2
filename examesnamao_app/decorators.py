# examesnamao_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from functools import wraps

from flask import current_app, g, request
from jose import JWTError, jwt

from .errors import AuthError, ConfigError

BEARER_PREFIX = "Bearer "


def verify_bearer(header: str | None) -> dict:
    """Valida o JWT do header Authorization e devolve as claims (precisa de 'sub')."""
    if not header or not header.startswith(BEARER_PREFIX):
        raise AuthError("missing bearer token")
    secret = current_app.config.get("AUTH_JWT_SECRET")
    if not secret:
        raise ConfigError("AUTH_JWT_SECRET is not configured")

    token = header[len(BEARER_PREFIX):].strip()
    audience = current_app.config.get("AUTH_JWT_AUDIENCE") or None
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as e:
        raise AuthError(f"invalid token: {e}") from e
    if not claims.get("sub"):
        raise AuthError("token without sub")
    return claims


def bearer_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        claims = verify_bearer(request.headers.get("Authorization"))
        g.user_id = claims["sub"]
        g.claims = claims
        return view_func(*args, **kwargs)
    return wrapper
