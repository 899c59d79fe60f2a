from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from link_sanitizer.api.deps import get_blocklist_store, get_metadata_service
from link_sanitizer.schemas import PreviewRead, PreviewRequest
from link_sanitizer.services.blocklist import BlockListStore
from link_sanitizer.services.metadata import MetadataService
from link_sanitizer.services.sanitizer import sanitize

router = APIRouter(prefix="/preview", tags=["preview"])


@router.post("", response_model=PreviewRead, response_model_exclude_none=True)
async def preview_link(
    payload: PreviewRequest,
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
    metadata: Annotated[MetadataService, Depends(get_metadata_service)],
) -> PreviewRead:
    """Sanitize a URL, then build a link preview for the cleaned URL."""
    blocklist = await store.load()
    result = sanitize(payload.url, blocklist.as_set())
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=result.error_message or "URL cannot be empty.",
        )

    preview = await metadata.extract(result.cleaned_url)
    return PreviewRead(url=result.cleaned_url, data=preview.data, error=preview.error)
