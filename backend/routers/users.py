import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import OidcUser, current_admin, current_user, optional_oidc_user
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.users import User, UserFilterQuery, UserSortQuery
from schemas.users import EditUserRequest, UserListResponse, UserRead
from services import users as users_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=Optional[UserRead])
async def get_current_user(
    oidc_user: Optional[OidcUser] = Depends(optional_oidc_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Current user, registered on the first call. A banned user still sees their own row."""
    if oidc_user is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    user = await users_service.find_user_by_id(db, oidc_user.id)
    if user is None:
        user = await users_service.create_user(db, User(
            id=oidc_user.id,
            email=oidc_user.email,
            name=oidc_user.name,
            username=oidc_user.username,
            is_admin=False,
            is_banned=False,
        ))
        logger.info("New user registered: %s", user)
    else:
        user = await users_service.update_user_last_access_time(db, oidc_user.id)

    return UserRead(**user.to_schema)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_user),
):
    if user.id != user_id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only see your own profile")
    found = await users_service.find_user_by_id(db, user_id)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"The user with id: {user_id} doesn't exist")
    return UserRead(**found.to_schema)


@router.get("", response_model=UserListResponse)
async def list_users(
    page: Pagination = Depends(pagination),
    filter: UserFilterQuery = Depends(filter_query(UserFilterQuery)),
    sort: UserSortQuery = Depends(sort_query(UserSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    users = await users_service.list_users_with_condition(db, filter, sort, page)
    total = await users_service.count_users_with_condition(db, filter)
    return UserListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        users=[UserRead(**u.to_schema) for u in users],
    )


@router.put("/{user_id}")
async def edit_user(
    user_id: UUID,
    payload: EditUserRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    user = await users_service.update_user(db, user_id, payload.into_changes())
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"The user with id: {user_id} doesn't exist")
    logger.info('%s successfully edited user "%s" - %s', admin, user_id, user.to_schema)
    return Response(status_code=status.HTTP_200_OK)
