"""Pydantic models for HTTP API responses."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="'ok' when the service is configured")
    version: str
    rethinkdb: str = Field(..., description="RethinkDB address (host:port)")
    facebook_login: bool = Field(
        ..., description="Whether Facebook login is configured"
    )


class ServiceInfo(BaseModel):
    """Root endpoint response."""
    service: str
    version: str
    docs: str = "/docs"
