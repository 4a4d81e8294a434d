"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across all API endpoints.

==============================================================================
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Error payload produced by AppException.to_dict()."""
    code: str
    message: str
    timestamp: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""
    success: bool = Field(default=False)
    error: ErrorBody


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    components: Dict[str, str]
