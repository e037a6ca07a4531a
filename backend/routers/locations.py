import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_admin, optional_admin
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.location import LocationFilterQuery, LocationSortQuery
from db.users import User
from schemas.locations import EditLocationRequest, LocationListResponse, LocationRead, NewLocationRequest
from services import locations as locations_service

logger = logging.getLogger(__name__)

router = APIRouter()


def location_not_found(location_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The location with id: {location_id} doesn't exist",
    )


@router.get("/{location_id}", response_model=LocationRead)
async def get_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    location = await locations_service.find_location_by_id(db, location_id)
    if location is None or (location.hidden and admin is None):
        raise location_not_found(location_id)
    return LocationRead(**location.to_schema)


@router.get("", response_model=LocationListResponse)
async def list_locations(
    page: Pagination = Depends(pagination),
    filter: LocationFilterQuery = Depends(filter_query(LocationFilterQuery)),
    sort: LocationSortQuery = Depends(sort_query(LocationSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    if admin is None:
        filter.hidden_eq = False
        filter.hidden_neq = None

    locations = await locations_service.list_locations_with_condition(db, filter, sort, page)
    total = await locations_service.count_locations_with_condition(db, filter)
    return LocationListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        locations=[LocationRead(**location.to_schema) for location in locations],
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: NewLocationRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    location = await locations_service.create_location(db, payload.into_model())
    logger.info("%s added a new location %s - %s", admin, location.id, location.to_schema)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=str(location.id))


@router.put("/{location_id}")
async def edit_location(
    location_id: UUID,
    payload: EditLocationRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    changes = payload.into_changes()
    location = await locations_service.update_location(db, location_id, changes)
    if location is None:
        raise location_not_found(location_id)
    logger.info('%s successfully edited location "%s" - %s', admin, location_id, location.to_schema)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{location_id}")
async def delete_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    location = await locations_service.update_location(db, location_id, {"disabled": True})
    if location is None:
        raise location_not_found(location_id)
    logger.info('%s successfully deleted location "%s"', admin, location_id)
    return Response(status_code=status.HTTP_200_OK)
