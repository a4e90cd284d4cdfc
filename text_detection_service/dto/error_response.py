from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """JSON body returned when the provider or local storage fails."""

    error: str = Field(..., description="Provider error code or error class name.")
    message: str = Field(..., description="Human readable detail.")
