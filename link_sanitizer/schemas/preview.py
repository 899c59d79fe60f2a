from typing import Optional

from pydantic import BaseModel

from link_sanitizer.services.metadata import PreviewRecord


class PreviewRequest(BaseModel):
    url: str


class PreviewRead(BaseModel):
    url: str
    data: Optional[PreviewRecord] = None
    error: Optional[str] = None
