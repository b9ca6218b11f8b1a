"""Database health check.

/healthz is not on the access gate's public list, so it needs a token like
every other non-public path.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse

from kpopapi.core import check_db_connection

router = APIRouter(tags=["health"])


@router.get(
    "/healthz",
    response_class=PlainTextResponse,
    responses={
        status.HTTP_200_OK: {"description": "Database reachable"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Database unreachable"},
    },
)
async def healthz(request: Request) -> PlainTextResponse:
    if not await check_db_connection(request.app.state.session_maker):
        return PlainTextResponse("db not ok", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return PlainTextResponse("ok")
