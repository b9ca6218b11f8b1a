"""Protected demo endpoint."""

from fastapi import APIRouter

router = APIRouter(tags=["data"])


@router.get("/data")
async def secret_data() -> dict[str, str]:
    """Return data only visible with a valid token."""
    return {"msg": "secret data"}
