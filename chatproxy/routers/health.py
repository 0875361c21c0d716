from fastapi import APIRouter

from ..log_sink import utc_timestamp
from ..models.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        message="Server is running",
        timestamp=utc_timestamp(),
    )
