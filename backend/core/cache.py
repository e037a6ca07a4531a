"""
Optional Redis cache in front of the database.

Rows are stored as JSON dictionaries of their column values under
``<entity>:<id>``; a list page is stored under
``<entities>:<filter>-<sort>-<page>/<per_page>`` as the list of its member
keys. The cache is disabled until `Cache.configure` is given a URL or a client.
A cache failure is logged and treated as a miss, it never fails the request.
"""

import datetime
import decimal
import enum
import json
import logging
import uuid
from typing import Any, Callable, Iterable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3 * 60 * 60
USER_TTL = 15 * 60


def _json_default(value):
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_row(obj) -> dict:
    """Column values of an ORM instance, JSON ready."""
    return {
        column.key: json.loads(json.dumps(getattr(obj, column.key), default=_json_default))
        for column in obj.__table__.columns
    }


def _load_value(column, value):
    if value is None:
        return None
    enum_class = getattr(column.type, "enum_class", None)
    if enum_class is not None:
        return enum_class(value)
    python_type = column.type.python_type
    if python_type is uuid.UUID:
        return uuid.UUID(value)
    if python_type is decimal.Decimal:
        return decimal.Decimal(value)
    if python_type is datetime.datetime:
        return datetime.datetime.fromisoformat(value)
    return value


def load_row(model, data: dict):
    """Rebuild a transient ORM instance from `dump_row` output."""
    return model(**{
        column.key: _load_value(column, data.get(column.key))
        for column in model.__table__.columns
    })


class Cache:
    def __init__(self):
        self._client = None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def configure(self, url: Optional[str] = None, client=None):
        if client is not None:
            self._client = client
        elif url:
            self._client = redis.from_url(url, decode_responses=True)
            logger.info("Cache enabled")
        else:
            self._client = None

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Optional[Any]:
        if self._client is None:
            return None
        try:
            raw = await self._client.get(key)
            return json.loads(raw) if raw is not None else None
        except (RedisError, ValueError) as e:
            logger.warning("Cache get %s failed: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL):
        if self._client is None:
            return
        try:
            await self._client.set(key, json.dumps(value, default=_json_default), ex=ttl)
        except (RedisError, TypeError) as e:
            logger.warning("Cache set %s failed: %s", key, e)

    async def mget_list(self, list_key: str) -> Optional[List[Any]]:
        """Items of a cached list, None when the list or any member expired."""
        keys = await self.get(list_key)
        if keys is None:
            return None
        if not keys:
            return []
        try:
            raws = await self._client.mget(keys)
            if any(raw is None for raw in raws):
                return None
            return [json.loads(raw) for raw in raws]
        except (RedisError, ValueError) as e:
            logger.warning("Cache mget %s failed: %s", list_key, e)
            return None

    async def mset_list(
        self,
        list_key: str,
        items: Iterable[Any],
        ttl: int,
        key_fn: Callable[[Any], str],
    ):
        if self._client is None:
            return
        items = list(items)
        try:
            pipe = self._client.pipeline()
            for item in items:
                pipe.set(key_fn(item), json.dumps(item, default=_json_default), ex=ttl)
            pipe.set(list_key, json.dumps([key_fn(item) for item in items]), ex=ttl)
            await pipe.execute()
        except (RedisError, TypeError) as e:
            logger.warning("Cache mset %s failed: %s", list_key, e)

    async def delete(self, *keys: str):
        if self._client is None or not keys:
            return
        try:
            await self._client.delete(*keys)
        except RedisError as e:
            logger.warning("Cache delete %s failed: %s", keys, e)

    async def delete_prefix(self, prefix: str):
        if self._client is None:
            return
        try:
            keys = [key async for key in self._client.scan_iter(match=f"{prefix}*")]
            if keys:
                await self._client.delete(*keys)
        except RedisError as e:
            logger.warning("Cache delete prefix %s failed: %s", prefix, e)


cache = Cache()
