"""Resource catalog search."""

import hashlib
import json
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from redis import asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lp.config import get_settings
from lp.models import Resource
from lp.services.search import relevance, tokenize

logger = logging.getLogger(__name__)

RESOURCE_FIELD_WEIGHTS = {"title": 1, "description": 1}

# Shared by every request; created on first cache use
_redis_client: Optional[aioredis.Redis] = None


async def get_cache_client() -> aioredis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = await aioredis.from_url(get_settings().redis_url)
    return _redis_client


async def close_cache_client() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class ResourceService:
    """Read-only search over the aggregated resource catalog."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self._redis: Optional[aioredis.Redis] = None

    async def _get_redis(self) -> aioredis.Redis:
        if not self._redis:
            self._redis = await get_cache_client()
        return self._redis

    def _cache_key(
        self,
        query: Optional[str],
        content_type: Optional[str],
        source: Optional[str],
        limit: int,
    ) -> str:
        raw = json.dumps([query or "", content_type, source, limit])
        return f"resources:search:{hashlib.sha256(raw.encode()).hexdigest()}"

    async def search(
        self,
        query: Optional[str] = None,
        content_type: Optional[str] = None,
        source: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Tuple[Resource, Optional[float]]]:
        """Filter by exact content type / source and rank by text relevance."""
        page_size = self.settings.resource_page_size
        limit = min(limit or page_size, page_size)

        if not self.settings.resource_cache_enabled:
            return await self._search(query, content_type, source, limit)

        key = self._cache_key(query, content_type, source, limit)
        try:
            redis = await self._get_redis()
            cached = await redis.get(key)
        except RedisError as exc:
            logger.warning("Resource cache unavailable: %s", exc)
            return await self._search(query, content_type, source, limit)

        if cached:
            return await self._load_cached(json.loads(cached))

        results = await self._search(query, content_type, source, limit)
        payload = [[str(resource.id), score] for resource, score in results]
        try:
            await redis.set(key, json.dumps(payload), ex=self.settings.resource_cache_ttl)
        except RedisError as exc:
            logger.warning("Failed to cache resource search: %s", exc)
        return results

    async def _search(
        self,
        query: Optional[str],
        content_type: Optional[str],
        source: Optional[str],
        limit: int,
    ) -> List[Tuple[Resource, Optional[float]]]:
        stmt = select(Resource)
        if content_type:
            stmt = stmt.where(Resource.content_type == content_type)
        if source:
            stmt = stmt.where(Resource.source == source)

        terms = set(tokenize(query))
        if not terms:
            result = await self.db.execute(
                stmt.order_by(Resource.updated_at.desc()).limit(limit)
            )
            return [(resource, None) for resource in result.scalars().all()]

        result = await self.db.execute(stmt)
        scored = []
        for resource in result.scalars().all():
            score = relevance(
                terms,
                (
                    (getattr(resource, name), weight)
                    for name, weight in RESOURCE_FIELD_WEIGHTS.items()
                ),
            )
            if score > 0:
                scored.append((resource, score))

        scored.sort(key=lambda item: (item[1], item[0].updated_at), reverse=True)
        return scored[:limit]

    async def _load_cached(
        self, entries: List[List]
    ) -> List[Tuple[Resource, Optional[float]]]:
        ids = [UUID(resource_id) for resource_id, _ in entries]
        if not ids:
            return []
        result = await self.db.execute(select(Resource).where(Resource.id.in_(ids)))
        by_id = {resource.id: resource for resource in result.scalars().all()}
        return [
            (by_id[UUID(resource_id)], score)
            for resource_id, score in entries
            if UUID(resource_id) in by_id
        ]
