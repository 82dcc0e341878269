from pydantic import BaseModel
from typing import Optional


class ValidateKeyRequest(BaseModel):
    api_key: Optional[str] = None


class ValidateKeyResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
