from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.query import Pagination
from db.location import Location, LocationFilterQuery, LocationSortQuery
from . import common

ENTITIES = "locations"


def location_key(location_id) -> str:
    return f"location:{location_id}"


async def find_location_by_id(db: AsyncSession, location_id: UUID) -> Optional[Location]:
    return await common.find_by_id(db, Location, location_key(location_id), location_id)


async def list_locations_with_condition(
    db: AsyncSession, filter: LocationFilterQuery, sort: LocationSortQuery, pagination: Pagination
) -> List[Location]:
    return await common.list_with_condition(
        db, Location, ENTITIES, lambda row: location_key(row["id"]), filter, sort, pagination
    )


async def count_locations_with_condition(db: AsyncSession, filter: LocationFilterQuery) -> int:
    return await common.count_with_condition(db, Location, filter)


async def create_location(db: AsyncSession, location: Location) -> Location:
    db.add(location)
    await db.commit()
    await common.invalidate(None, ENTITIES)
    return location


async def update_location(db: AsyncSession, location_id: UUID, changes: dict) -> Optional[Location]:
    location = await common.update_row(db, Location, location_id, changes)
    await common.invalidate(location_key(location_id), ENTITIES)
    return location


async def delete_location(db: AsyncSession, location_id: UUID) -> bool:
    deleted = await common.delete_row(db, Location, location_id)
    await common.invalidate(location_key(location_id), ENTITIES)
    return deleted
