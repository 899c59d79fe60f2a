from typing import Optional

from pydantic import BaseModel, Field

from link_sanitizer.services.sanitizer import SanitizationResult, SanitizeError


class SanitizeRequest(BaseModel):
    url: str = Field(description="Raw user input; a bare domain is accepted")


class SanitizeRead(BaseModel):
    cleaned_url: str
    was_modified: bool
    preserved_timestamp_seconds: Optional[int] = None
    timestamp_display: Optional[str] = None
    error_kind: Optional[SanitizeError] = None
    error_message: Optional[str] = None
    discovered_keys: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: SanitizationResult) -> "SanitizeRead":
        return cls(
            cleaned_url=result.cleaned_url,
            was_modified=result.was_modified,
            preserved_timestamp_seconds=result.preserved_timestamp_seconds,
            timestamp_display=result.timestamp_display,
            error_kind=result.error_kind,
            error_message=result.error_message,
            discovered_keys=sorted(result.discovered_keys),
        )
