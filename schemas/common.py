"""Common schemas shared across different modules."""

from typing import Literal

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """Outcome of a single user action, rendered as a status banner."""

    status: Literal["success", "error", "notice"] = Field(
        ..., description="Banner type"
    )
    message: str = Field(..., description="Message shown to the user")
    resource_id: str | None = Field(
        default=None, description="ID of the provider object the action produced"
    )
    redirect_url: str | None = Field(
        default=None, description="Provider-hosted page to send the browser to"
    )

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status != "error"


class ErrorResponse(BaseModel):
    """Error body returned by the JSON API."""

    error: str = Field(..., description="Error type")
    description: str = Field(..., description="Human readable error message")
    request_id: str | None = Field(default=None, description="Request ID")


class HostedPageResponse(BaseModel):
    """Provider-hosted URL the caller should redirect to."""

    id: str = Field(..., description="Stripe session ID")
    url: str = Field(..., description="Hosted page URL")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy", description="Service status")
    version: str = Field(..., description="Application version")
    timestamp: int = Field(..., description="Current timestamp")
