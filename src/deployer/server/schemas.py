"""Pydantic schemas for deploy webhook endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NodePayload(BaseModel):
    """Deployment node announced by a signed webhook."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    api_endpoint: str = Field(alias="apiEndpoint")
    registered: bool = False


class DeployWebhookResponse(BaseModel):
    """Response payload for the deploy webhook endpoint."""

    accepted: bool
    node: NodePayload
    authenticated_by: str
