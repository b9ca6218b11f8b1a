"""Middleware module for the KPop Idol API."""

from kpopapi.middleware.access_gate import AccessGateMiddleware, decide, is_public_path
from kpopapi.middleware.cors import PreflightCORSMiddleware
from kpopapi.middleware.revocation_cleanup import revocation_cleanup_loop

__all__ = [
    "AccessGateMiddleware",
    "PreflightCORSMiddleware",
    "decide",
    "is_public_path",
    "revocation_cleanup_loop",
]
