from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.query import Pagination
from db.refill import Refill, RefillFilterQuery, RefillSortQuery
from . import common

ENTITIES = "refills"


def refill_key(refill_id) -> str:
    return f"refill:{refill_id}"


async def find_refill_by_id(db: AsyncSession, refill_id: UUID) -> Optional[Refill]:
    return await common.find_by_id(db, Refill, refill_key(refill_id), refill_id)


async def list_refills_with_condition(
    db: AsyncSession, filter: RefillFilterQuery, sort: RefillSortQuery, pagination: Pagination
) -> List[Refill]:
    return await common.list_with_condition(
        db, Refill, ENTITIES, lambda row: refill_key(row["id"]), filter, sort, pagination
    )


async def count_refills_with_condition(db: AsyncSession, filter: RefillFilterQuery) -> int:
    return await common.count_with_condition(db, Refill, filter)


async def create_refill(db: AsyncSession, refill: Refill) -> Refill:
    db.add(refill)
    await db.commit()
    await common.invalidate(None, ENTITIES)
    return refill


async def update_refill(db: AsyncSession, refill_id: UUID, changes: dict) -> Optional[Refill]:
    refill = await common.update_row(db, Refill, refill_id, changes)
    await common.invalidate(refill_key(refill_id), ENTITIES)
    return refill


async def delete_refill(db: AsyncSession, refill_id: UUID) -> bool:
    deleted = await common.delete_row(db, Refill, refill_id)
    await common.invalidate(refill_key(refill_id), ENTITIES)
    return deleted
