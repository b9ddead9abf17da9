"""API route handlers."""

from fastapi import APIRouter, Depends, HTTPException, Request

from ..config import ServiceConfig
from .models import HealthResponse

router = APIRouter(prefix="/v1", tags=["service"])


def get_config(request: Request) -> ServiceConfig:
    """Dependency injection for the loaded service config."""
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(status_code=503, detail="Service not configured")
    return config


@router.get("/health", response_model=HealthResponse)
async def health(config: ServiceConfig = Depends(get_config)) -> HealthResponse:
    """Health check endpoint. Reports config without secrets."""
    return HealthResponse(
        status="ok",
        version=config.server.version,
        rethinkdb=config.rethinkdb.address,
        facebook_login=config.facebook.enabled,
    )
