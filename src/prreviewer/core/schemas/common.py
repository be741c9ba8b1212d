"""Error envelope shared by every endpoint."""
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Schema for every non-2xx response body."""
    error: ErrorDetail
