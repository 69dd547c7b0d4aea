"""
API models for the order confirmation endpoints.

Every response uses the same envelope: `success`, a human `message`, and an
optional `data` payload.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field


class OrderConfirmationRequest(BaseModel):
    """Request to dispatch confirmations for one order."""
    order_id: int = Field(
        ...,
        gt=0,
        strict=True,
        description="Identifier of the order to confirm",
    )


class ApiResponse(BaseModel):
    """Standard JSON envelope."""
    success: bool
    message: str
    data: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Envelope returned for rejected requests."""
    success: bool = False
    message: str
    errors: Optional[list[dict[str, Any]]] = None
