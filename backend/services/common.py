"""
Cached lookups shared by the entity services.

Single rows live under ``<entity>:<id>`` and list pages under
``<entities>:<filter>-<sort>-<page>/<per_page>``; every mutation drops the row
key and all list pages of the entity.
"""

from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import DEFAULT_TTL, cache, dump_row, load_row
from core.query import FilterQuery, Pagination, SortQuery


def list_key(entities: str, filter: FilterQuery, sort: SortQuery, pagination: Pagination) -> str:
    return f"{entities}:{filter}-{sort}-{pagination.page}/{pagination.per_page}"


async def find_by_id(db: AsyncSession, model, key: str, ident, ttl: int = DEFAULT_TTL):
    cached = await cache.get(key)
    if cached is not None:
        return load_row(model, cached)
    row = await db.get(model, ident)
    if row is not None:
        await cache.set(key, dump_row(row), ttl)
    return row


def select_page(model, filter: FilterQuery, sort: SortQuery, pagination: Pagination):
    # primary key last so pages are stable when the sort columns tie
    return (
        select(model)
        .where(filter.into_condition())
        .order_by(*sort.order_by(), *model.__table__.primary_key.columns)
        .offset(pagination.offset())
        .limit(pagination.per_page)
    )


async def list_with_condition(
    db: AsyncSession,
    model,
    entities: str,
    key_fn: Callable[[dict], str],
    filter: FilterQuery,
    sort: SortQuery,
    pagination: Pagination,
    ttl: int = DEFAULT_TTL,
):
    key = list_key(entities, filter, sort, pagination)
    cached = await cache.mget_list(key)
    if cached is not None:
        return [load_row(model, data) for data in cached]

    result = await db.execute(select_page(model, filter, sort, pagination))
    rows = result.scalars().all()
    await cache.mset_list(key, [dump_row(row) for row in rows], ttl, key_fn)
    return rows


async def count_with_condition(db: AsyncSession, model, filter: FilterQuery) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(filter.into_condition()))
    return result.scalar_one()


async def update_row(db: AsyncSession, model, ident, changes: dict) -> Optional[object]:
    row = await db.get(model, ident)
    if row is None:
        return None
    for field, value in changes.items():
        setattr(row, field, value)
    await db.commit()
    return row


async def delete_row(db: AsyncSession, model, ident) -> bool:
    row = await db.get(model, ident)
    if row is None:
        return False
    await db.delete(row)
    await db.commit()
    return True


async def invalidate(key: Optional[str], entities: str):
    if key is not None:
        await cache.delete(key)
    await cache.delete_prefix(f"{entities}:")
