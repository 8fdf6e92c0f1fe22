import logging
import secrets
from typing import List, Optional, Union

from fastapi import HTTPException, Request, status

log = logging.getLogger("canary.auth")

BEARER = b"bearer"


def candidate_tokens(authorization: Union[bytes, str, None]) -> List[bytes]:
    '''
    Tokens a client may have meant by its Authorization header.
    Accepts both "Bearer <token>" and a bare "<token>" value.
    '''
    if not authorization:
        return []
    if isinstance(authorization, str):
        authorization = authorization.encode("utf-8")
    value = authorization.strip()
    if not value:
        return []
    candidates = [value]
    parts = value.split(None, 1)
    if len(parts) == 2 and parts[0].lower() == BEARER:
        candidates.append(parts[1].strip())
    return candidates


class Authenticator:
    def __init__(self, secret: str) -> None:
        self._secret = secret.encode("utf-8")

    def verify(self, authorization: Union[bytes, str, None]) -> bool:
        if not self._secret:
            return False
        ok = False
        for token in candidate_tokens(authorization):
            # compare every candidate, no early exit
            if secrets.compare_digest(token, self._secret):
                ok = True
        return ok


def raw_authorization(request: Request) -> Optional[bytes]:
    # Starlette decodes header values as latin-1, which round-trips the wire bytes
    value = request.headers.get("Authorization")
    return value.encode("latin-1") if value is not None else None


def require_operator(request: Request) -> None:
    '''FastAPI dependency guarding the ping submission route.'''
    authenticator: Authenticator = request.app.state.authenticator
    if not authenticator.verify(raw_authorization(request)):
        host = request.client.host if request.client else "unknown"
        log.warning("Unauthorized ping attempt from %s", host)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
