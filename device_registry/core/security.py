"""Authenticated-principal gate.

The service never issues credentials. It only turns request headers into an
optional :class:`Principal` through an injectable resolver; the default one
validates a bearer JWT signed with the configured secret.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from device_registry.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Principal:
    id: str
    name: Optional[str] = None


PrincipalResolver = Callable[[Mapping[str, str]], Optional[Principal]]

ANONYMOUS = Principal(id="anonymous", name="anonymous")


def decode_principal(token: str, settings: Settings) -> Optional[Principal]:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        return None

    subject = payload.get("sub")
    if not subject:
        return None
    return Principal(id=str(subject), name=payload.get("name"))


def bearer_token_resolver(settings: Settings) -> PrincipalResolver:
    def resolve(headers: Mapping[str, str]) -> Optional[Principal]:
        if not settings.security.require_auth:
            return ANONYMOUS
        authorization = headers.get("authorization") or ""
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        return decode_principal(token.strip(), settings)

    return resolve


async def get_current_principal(request: Request) -> Principal:
    resolver: PrincipalResolver = request.app.state.principal_resolver
    principal = resolver(request.headers)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
