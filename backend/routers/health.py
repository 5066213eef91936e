from fastapi import APIRouter

from models.schemas import HealthResponse
from routers.stream import store

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint; reports how many tracks are being simulated."""
    return HealthResponse(status="healthy", tracks=len(store))
