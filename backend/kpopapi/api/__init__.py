# KPop Idol API routes
from kpopapi.api.router import api_router

__all__ = ["api_router"]
