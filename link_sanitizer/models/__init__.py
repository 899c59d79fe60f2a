from link_sanitizer.models.base import Base
from link_sanitizer.models.key_value import KeyValue

__all__ = ["Base", "KeyValue"]
