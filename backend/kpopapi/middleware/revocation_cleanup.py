"""Background purge of expired token revocations."""

import asyncio
import logging

from kpopapi.services.token_store import TokenStore

logger = logging.getLogger(__name__)


async def revocation_cleanup_loop(store: TokenStore, interval_seconds: float) -> None:
    """Periodically drop revocation entries whose tokens have expired."""
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            removed = store.purge_expired()
            if removed > 0:
                logger.debug(f"Revocation cleanup: removed {removed} expired entries")
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.warning(f"Revocation cleanup error: {e}")
