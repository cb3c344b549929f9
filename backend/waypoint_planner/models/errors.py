"""API error envelope models."""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by the API."""

    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_CANDIDATES = "NO_CANDIDATES"
    NO_ROUTE = "NO_ROUTE"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload shown to the user."""

    code: ErrorCode
    message: str = Field(..., description="Technical error message")
    user_message: str = Field(..., description="Message safe to show in the UI")
