from datetime import UTC, datetime

from fastapi import APIRouter

from rtd_relay import __version__
from rtd_relay.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe: always ok while the process is up."""
    return HealthResponse(
        status="ok",
        message="RTD N Line API Proxy is running",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )
