"""Shared response schemas."""

from pydantic import BaseModel


class HealthCheck(BaseModel):
    service_name: str
    api_version: str
    status: str
