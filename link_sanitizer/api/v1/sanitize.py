from typing import Annotated

from fastapi import APIRouter, Depends

from link_sanitizer.api.deps import get_blocklist_store
from link_sanitizer.schemas import SanitizeRead, SanitizeRequest
from link_sanitizer.services.blocklist import BlockListStore
from link_sanitizer.services.sanitizer import sanitize

router = APIRouter(prefix="/sanitize", tags=["sanitize"])


@router.post("", response_model=SanitizeRead)
async def sanitize_link(
    payload: SanitizeRequest,
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
) -> SanitizeRead:
    """Strip blocked tracking parameters from a URL.

    Unsupported or malformed input is not an HTTP error; it is reported in
    `error_kind` / `error_message`.
    """
    blocklist = await store.load()
    result = sanitize(payload.url, blocklist.as_set())
    return SanitizeRead.from_result(result)
