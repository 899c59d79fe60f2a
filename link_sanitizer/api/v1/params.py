import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from link_sanitizer.api.deps import get_blocklist_store
from link_sanitizer.schemas import ParameterCreate, ParameterList
from link_sanitizer.services.blocklist import BlockListStore, normalize_param

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/params", tags=["params"])


@router.get("", response_model=ParameterList)
async def list_params(
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
) -> ParameterList:
    """List the blocked parameters in stored order."""
    blocklist = await store.load()
    return ParameterList.from_names(blocklist.to_list())


@router.post("", response_model=ParameterList, status_code=status.HTTP_201_CREATED)
async def add_param(
    payload: ParameterCreate,
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
) -> ParameterList:
    """Block an additional parameter."""
    blocklist = await store.load()
    try:
        added = blocklist.add(payload.name)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc)
        )
    if not added:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f'Parameter "{normalize_param(payload.name)}" '
                "is already in the list."
            ),
        )

    await store.save(blocklist)
    logger.info("Blocked parameter %r", normalize_param(payload.name))
    return ParameterList.from_names(blocklist.to_list())


@router.delete("/{name}", response_model=ParameterList)
async def remove_param(
    name: str,
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
) -> ParameterList:
    """Stop blocking a parameter."""
    blocklist = await store.load()
    if not blocklist.remove(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Parameter not found"
        )

    await store.save(blocklist)
    logger.info("Unblocked parameter %r", normalize_param(name))
    return ParameterList.from_names(blocklist.to_list())


@router.post("/reset", response_model=ParameterList)
async def reset_params(
    store: Annotated[BlockListStore, Depends(get_blocklist_store)],
) -> ParameterList:
    """Restore the default tracking parameters."""
    blocklist = await store.load()
    blocklist.reset()
    await store.save(blocklist)
    return ParameterList.from_names(blocklist.to_list())
