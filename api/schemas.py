from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    api_key_configured: bool


class UploadResult(BaseModel):
    doc_id: str
    filename: Optional[str] = None
