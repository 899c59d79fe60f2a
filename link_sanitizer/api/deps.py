from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from link_sanitizer.database import get_db
from link_sanitizer.services.blocklist import BlockListStore
from link_sanitizer.services.metadata import MetadataService


async def get_blocklist_store(
    db: AsyncSession = Depends(get_db),
) -> BlockListStore:
    return BlockListStore(db)


def get_metadata_service() -> MetadataService:
    return MetadataService()
