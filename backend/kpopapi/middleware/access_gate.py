"""Bearer token access gate.

Every request passes through AccessGateMiddleware. Public paths go straight
to their handler; everything else needs an Authorization: Bearer <token>
header whose token the TokenStore accepts.

Public paths are matched by plain prefix/suffix comparison, never regex:
- prefix /api/login (login endpoint)
- prefix /swagger (documentation UI and /swagger.json)
- exactly / (root)
- suffix .html, .js, .css (static assets)
"""

import logging
from dataclasses import dataclass

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from kpopapi.services.auth import TokenClaims, TokenError
from kpopapi.services.token_store import TokenStore

logger = logging.getLogger(__name__)

PUBLIC_PREFIXES = ("/api/login", "/swagger")
PUBLIC_SUFFIXES = (".html", ".js", ".css")
PUBLIC_EXACT_PATHS = ("/",)

MISSING_TOKEN = "missing bearer token"
INVALID_TOKEN = "invalid or expired token"

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class GateDecision:
    """Outcome of classifying one request."""

    allowed: bool
    reason: str | None = None
    claims: TokenClaims | None = None


def is_public_path(path: str) -> bool:
    return (
        path in PUBLIC_EXACT_PATHS
        or path.startswith(PUBLIC_PREFIXES)
        or path.endswith(PUBLIC_SUFFIXES)
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an Authorization header, or None if absent.

    "Bearer " with nothing after it is treated as absent.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :]
    return token or None


def decide(path: str, authorization: str | None, store: TokenStore) -> GateDecision:
    """Classify a request as allowed or rejected."""
    if is_public_path(path):
        return GateDecision(allowed=True)

    token = extract_bearer_token(authorization)
    if token is None:
        return GateDecision(allowed=False, reason=MISSING_TOKEN)

    try:
        claims = store.validate(token)
    except TokenError as e:
        logger.debug(f"Token rejected for {path}: {e}")
        return GateDecision(allowed=False, reason=INVALID_TOKEN)

    return GateDecision(allowed=True, claims=claims)


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Reject protected requests that lack a valid bearer token.

    On success the token claims are exposed to handlers as
    request.state.identity.
    """

    def __init__(self, app: ASGIApp, store: TokenStore):
        super().__init__(app)
        self.store = store

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # CORS preflight never carries credentials
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        decision = decide(path, request.headers.get("Authorization"), self.store)

        if not decision.allowed:
            logger.warning(
                f"Rejected {request.method} {path}: {decision.reason}",
                extra={"method": request.method, "path": path, "status": 401, "reason": decision.reason},
            )
            return JSONResponse(
                status_code=401,
                content={"error": decision.reason},
                headers={"WWW-Authenticate": "Bearer"},
            )

        if decision.claims is not None:
            request.state.identity = decision.claims
        return await call_next(request)
