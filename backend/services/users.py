from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import USER_TTL
from core.query import Pagination
from db.database import utcnow
from db.users import User, UserFilterQuery, UserSortQuery
from . import common

ENTITIES = "users"


def user_key(user_id) -> str:
    return f"user:{user_id}"


async def find_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
    return await common.find_by_id(db, User, user_key(user_id), user_id, ttl=USER_TTL)


async def list_users_with_condition(
    db: AsyncSession, filter: UserFilterQuery, sort: UserSortQuery, pagination: Pagination
) -> List[User]:
    return await common.list_with_condition(
        db, User, ENTITIES, lambda row: user_key(row["id"]), filter, sort, pagination, ttl=USER_TTL
    )


async def count_users_with_condition(db: AsyncSession, filter: UserFilterQuery) -> int:
    return await common.count_with_condition(db, User, filter)


async def create_user(db: AsyncSession, user: User) -> User:
    db.add(user)
    await db.commit()
    await common.invalidate(user_key(user.id), ENTITIES)
    return user


async def update_user(db: AsyncSession, user_id: UUID, changes: dict) -> Optional[User]:
    user = await common.update_row(db, User, user_id, changes)
    await common.invalidate(user_key(user_id), ENTITIES)
    return user


async def update_user_last_access_time(db: AsyncSession, user_id: UUID) -> Optional[User]:
    return await update_user(db, user_id, {"last_access_at": utcnow()})


async def delete_user(db: AsyncSession, user_id: UUID) -> bool:
    deleted = await common.delete_row(db, User, user_id)
    await common.invalidate(user_key(user_id), ENTITIES)
    return deleted
