from typing import Any

from pydantic import BaseModel


class SecretWrite(BaseModel):
    data: dict[str, Any]   # validated against the type tag by the registry
    meta: str = ""


class SecretResponse(BaseModel):
    id: str
    type: str
    data: dict[str, Any]
    meta: str
