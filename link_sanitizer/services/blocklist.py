from __future__ import annotations

import logging
from typing import Iterable, Iterator

from sqlalchemy.ext.asyncio import AsyncSession

from link_sanitizer.config import settings
from link_sanitizer.models import KeyValue

logger = logging.getLogger(__name__)

DEFAULT_TRACKING_PARAMS: tuple[str, ...] = (
    "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
    "_ga", "ga_source", "ga_medium", "ga_term", "ga_content", "ga_campaign", "ga_place",
    "fbclid", "gclid", "msclkid", "dclid", "zanpid", "cjevent", "cjdata",
    "aff", "affiliate", "affiliate_id", "ref", "referral", "source", "trk", "trkid",
    "trkcampaign", "mc_cid", "mc_eid", "igshid", "si", "yclid", "_hsenc", "_hsmi",
    "hsctatracking", "mkt_tok", "vero_conv", "vero_id", "trk_contact", "trk_msg",
    "trk_module", "trk_sid", "echobox", "cid", "gad_campaignid", "gbraid",
    "gad_source", "gclsrc",
)


def normalize_param(name: str) -> str:
    return name.strip().lower()


class BlockList:
    """Ordered set of lowercase query parameter names to strip."""

    def __init__(self, names: Iterable[str] = DEFAULT_TRACKING_PARAMS) -> None:
        self._names: list[str] = []
        for name in names:
            normalized = normalize_param(name)
            if normalized and normalized not in self._names:
                self._names.append(normalized)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_param(name) in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def add(self, name: str) -> bool:
        """Add a parameter; returns False when it is already blocked."""
        normalized = normalize_param(name)
        if not normalized:
            raise ValueError("Parameter cannot be empty.")
        if normalized in self._names:
            return False
        self._names.append(normalized)
        return True

    def remove(self, name: str) -> bool:
        normalized = normalize_param(name)
        if normalized not in self._names:
            return False
        self._names.remove(normalized)
        return True

    def reset(self) -> None:
        self._names = list(DEFAULT_TRACKING_PARAMS)

    def as_set(self) -> frozenset[str]:
        return frozenset(self._names)

    def to_list(self) -> list[str]:
        return list(self._names)


class BlockListStore:
    """Loads and saves the block list as one JSON value in the key-value table."""

    def __init__(self, db: AsyncSession, key: str | None = None) -> None:
        self.db = db
        self.key = key or settings.blocklist_key

    async def load(self) -> BlockList:
        row = await self.db.get(KeyValue, self.key)
        if row is None:
            return BlockList()
        value = row.value
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            logger.warning("Ignoring invalid stored block list under %r", self.key)
            return BlockList()
        return BlockList(value)

    async def save(self, blocklist: BlockList) -> None:
        row = await self.db.get(KeyValue, self.key)
        if row is None:
            self.db.add(KeyValue(key=self.key, value=blocklist.to_list()))
        else:
            row.value = blocklist.to_list()
        await self.db.commit()
        logger.info("Saved block list (%d parameters)", len(blocklist))
