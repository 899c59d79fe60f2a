from link_sanitizer.schemas.params import ParameterCreate, ParameterList
from link_sanitizer.schemas.preview import PreviewRead, PreviewRequest
from link_sanitizer.schemas.sanitize import SanitizeRead, SanitizeRequest

__all__ = [
    "ParameterCreate",
    "ParameterList",
    "PreviewRead",
    "PreviewRequest",
    "SanitizeRead",
    "SanitizeRequest",
]
