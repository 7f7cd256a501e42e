from pydantic import BaseModel
from typing import Any, Dict

class HealthResponse(BaseModel):
    success: bool = True
    message: str

class UploadResponse(BaseModel):
    success: bool
    message: str
    result: Dict[str, Any]  # raw provider response

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
