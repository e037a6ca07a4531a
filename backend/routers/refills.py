import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_admin, optional_admin
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.refill import RefillFilterQuery, RefillSortQuery
from db.users import User
from schemas.refills import EditRefillRequest, NewRefillRequest, RefillListResponse, RefillRead
from services import refills as refills_service

logger = logging.getLogger(__name__)

router = APIRouter()


def refill_not_found(refill_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The refill with id: {refill_id} doesn't exist",
    )


@router.get("/{refill_id}", response_model=RefillRead)
async def get_refill(
    refill_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    refill = await refills_service.find_refill_by_id(db, refill_id)
    if refill is None or (refill.disabled and admin is None):
        raise refill_not_found(refill_id)
    return RefillRead(**refill.to_schema)


@router.get("", response_model=RefillListResponse)
async def list_refills(
    page: Pagination = Depends(pagination),
    filter: RefillFilterQuery = Depends(filter_query(RefillFilterQuery)),
    sort: RefillSortQuery = Depends(sort_query(RefillSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    if admin is None:
        filter.disabled_eq = False
        filter.disabled_neq = None

    refills = await refills_service.list_refills_with_condition(db, filter, sort, page)
    total = await refills_service.count_refills_with_condition(db, filter)
    return RefillListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        refills=[RefillRead(**r.to_schema) for r in refills],
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_refill(
    payload: NewRefillRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    refill = await refills_service.create_refill(db, payload.into_model())
    logger.info("%s added a new refill %s - %s", admin, refill.id, refill.to_schema)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=str(refill.id))


@router.put("/{refill_id}")
async def edit_refill(
    refill_id: UUID,
    payload: EditRefillRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    changes = payload.into_changes()
    refill = await refills_service.update_refill(db, refill_id, changes)
    if refill is None:
        raise refill_not_found(refill_id)
    logger.info('%s successfully edited refill "%s" - %s', admin, refill_id, refill.to_schema)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{refill_id}")
async def delete_refill(
    refill_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    refill = await refills_service.update_refill(db, refill_id, {"disabled": True})
    if refill is None:
        raise refill_not_found(refill_id)
    logger.info('%s successfully deleted refill "%s"', admin, refill_id)
    return Response(status_code=status.HTTP_200_OK)
