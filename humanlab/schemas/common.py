from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    trace_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
