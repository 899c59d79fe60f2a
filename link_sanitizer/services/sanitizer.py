"""URL sanitizer: strip blocked tracking parameters from a link.

`sanitize` is pure: it takes the raw user input and the set of parameter names
to block and returns a `SanitizationResult`. It never raises for bad input;
unparseable or non-web URLs are reported through `error_kind`.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict

VIDEO_HOSTS = ("youtube.com", "youtu.be")
TIMESTAMP_PARAM = "t"

_SCHEME_PREFIX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
# "localhost:8000/path" starts like a scheme but is a host and port.
_DECLARED_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:(?!\d+(?:[/?#]|$))")
_LEADING_DIGITS = re.compile(r"^\s*\+?(\d+)")
_FORBIDDEN_HOST_CHARS = frozenset("#%/:<>?@[\\]^|")
_AUTHORITY_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})


class SanitizeError(str, Enum):
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    MALFORMED = "malformed"


ERROR_MESSAGES = {
    SanitizeError.UNSUPPORTED_SCHEME: (
        "Could not process this URL type. Displaying original."
    ),
    SanitizeError.MALFORMED: (
        "Invalid URL format. Please enter a valid web address."
    ),
}


class SanitizationResult(BaseModel):
    cleaned_url: str = ""
    preserved_timestamp_seconds: Optional[int] = None
    was_modified: bool = False
    error_kind: Optional[SanitizeError] = None
    discovered_keys: frozenset[str] = frozenset()

    model_config = ConfigDict(frozen=True)

    @property
    def timestamp_display(self) -> Optional[str]:
        if self.preserved_timestamp_seconds is None:
            return None
        return format_timestamp(self.preserved_timestamp_seconds)

    @property
    def error_message(self) -> Optional[str]:
        if self.error_kind is None:
            return None
        return ERROR_MESSAGES[self.error_kind]

    @property
    def ok(self) -> bool:
        """True when there is a cleaned URL that can be previewed."""
        return self.error_kind is None and bool(self.cleaned_url)


def format_timestamp(seconds: int) -> str:
    """Format a playback offset as zero-padded ``hh:mm:ss``."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def is_video_host(hostname: Optional[str]) -> bool:
    if not hostname:
        return False
    return any(fragment in hostname for fragment in VIDEO_HOSTS)


def _check_authority(parts: SplitResult) -> None:
    host = parts.hostname
    if not host:
        raise ValueError("URL has no host")
    bracketed = parts.netloc.rpartition("@")[2].startswith("[")
    if not bracketed and any(
        ch in _FORBIDDEN_HOST_CHARS or ch.isspace() for ch in host
    ):
        raise ValueError(f"invalid host {host!r}")
    # Raises ValueError for a non-numeric or out of range port.
    parts.port


def parse_url(text: str) -> SplitResult:
    """Parse an absolute URL, raising ValueError when it is not one."""
    if not _SCHEME.match(text):
        raise ValueError("URL has no scheme")
    parts = urlsplit(text)
    if parts.netloc or parts.scheme in _AUTHORITY_SCHEMES:
        _check_authority(parts)
    return parts


def _split_params(text: str) -> list[tuple[str, str, str]]:
    """Split ``a=1&b=2`` into ``(segment, key, value)`` triples.

    The raw segment is kept so surviving parameters are written back verbatim;
    key and value are percent-decoded for matching only.
    """
    params = []
    for segment in text.split("&"):
        if not segment:
            continue
        key, _, value = segment.partition("=")
        params.append((segment, unquote_plus(key), unquote_plus(value)))
    return params


def _parse_seconds(value: str) -> Optional[int]:
    match = _LEADING_DIGITS.match(value)
    return int(match.group(1)) if match else None


def _unparseable(raw: str) -> SanitizationResult:
    try:
        parse_url(raw.strip())
    except ValueError:
        return SanitizationResult(error_kind=SanitizeError.MALFORMED)
    return SanitizationResult(
        cleaned_url=raw, error_kind=SanitizeError.UNSUPPORTED_SCHEME
    )


def sanitize(raw: str, block_set: Iterable[str]) -> SanitizationResult:
    """Remove blocked parameters from the query string and fragment of `raw`.

    Input without a ``scheme://`` prefix is treated as a bare domain and gets
    ``https://``. Parameter names are matched case-insensitively; kept
    parameters retain their original spelling and order. On video hosts the
    ``t`` parameter is always kept and its value reported as
    `preserved_timestamp_seconds`. The fragment is only filtered when it looks
    like a parameter list (contains ``=``) and is left untouched unless
    something was removed from it.
    """
    text = raw.strip()
    if not text:
        return SanitizationResult()

    assumed_scheme = not _SCHEME_PREFIX.match(text)
    candidate = f"https://{text}" if assumed_scheme else text
    try:
        if assumed_scheme and _DECLARED_SCHEME.match(text):
            raise ValueError("input declares its own scheme")
        parts = parse_url(candidate)
    except ValueError:
        return _unparseable(raw)

    blocked = {name.lower() for name in block_set}
    video_host = is_video_host(parts.hostname)
    discovered: set[str] = set()
    timestamp: Optional[int] = None

    kept = []
    query_dropped = False
    for segment, key, value in _split_params(parts.query):
        lowered = key.lower()
        if video_host and lowered == TIMESTAMP_PARAM:
            kept.append(segment)
            seconds = _parse_seconds(value)
            if seconds is not None:
                timestamp = seconds
        elif lowered in blocked:
            query_dropped = True
        else:
            kept.append(segment)
            if key:
                discovered.add(key)
    query = "&".join(kept) if query_dropped else parts.query
    modified = query_dropped

    fragment = parts.fragment
    if fragment and "=" in fragment:
        survivors = []
        fragment_dropped = False
        for segment, key, _ in _split_params(fragment):
            if key.lower() in blocked:
                fragment_dropped = True
            else:
                survivors.append(segment)
                if key:
                    discovered.add(key)
        if fragment_dropped:
            fragment = "&".join(survivors)
            modified = True

    cleaned = urlunsplit((parts.scheme, parts.netloc, parts.path, query, fragment))
    return SanitizationResult(
        cleaned_url=cleaned,
        preserved_timestamp_seconds=timestamp,
        was_modified=modified,
        discovered_keys=frozenset(discovered),
    )
