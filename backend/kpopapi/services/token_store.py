"""In-memory revocation store for bearer tokens.

The store is the only shared mutable state in the auth path. Every read or
write of the revocation map happens under one lock, so a validate that
starts after a revoke has returned always sees the revocation.

Entries are kept only until the token's own expiry. After that the token is
rejected by signature/expiry checks anyway, so dropping the entry can never
turn a rejection into an acceptance.
"""

import threading
import time
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from kpopapi.services.errors import TokenRevokedError

if TYPE_CHECKING:
    from kpopapi.services.auth import TokenClaims, TokenIssuer


class TokenStore:
    """Thread-safe map of revoked tokens to their expiry timestamps."""

    def __init__(self, issuer: "TokenIssuer", clock: Callable[[], float] = time.time):
        self._issuer = issuer
        self._clock = clock
        self._revoked: dict[str, float] = {}  # token -> expiry timestamp
        self._lock = threading.Lock()

    def validate(self, token: str) -> "TokenClaims":
        """Return the claims bound to a token that is live and not revoked.

        Raises TokenRevokedError, TokenExpiredError or InvalidTokenError.
        """
        if self.is_revoked(token):
            raise TokenRevokedError("Token has been revoked")
        return self._issuer.decode(token)

    def revoke(self, token: str, expires_at: datetime) -> None:
        """Revoke a token until its expiry. Revoking twice is a no-op."""
        exp = expires_at.timestamp()
        if exp <= self._clock():
            # Already dead; nothing to remember
            return
        with self._lock:
            self._revoked[token] = exp

    def is_revoked(self, token: str) -> bool:
        """Check the revocation map, dropping the entry if it has expired."""
        with self._lock:
            exp = self._revoked.get(token)
            if exp is None:
                return False
            if self._clock() >= exp:
                del self._revoked[token]
                return False
            return True

    def purge_expired(self) -> int:
        """Remove expired entries. Returns count removed."""
        now = self._clock()
        with self._lock:
            expired = [token for token, exp in self._revoked.items() if now >= exp]
            for token in expired:
                del self._revoked[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)
