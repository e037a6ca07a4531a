import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_admin
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.users import User
from db.warehouse import (
    WarehouseFilterQuery,
    WarehouseProductFilterQuery,
    WarehouseProductSortQuery,
    WarehouseSortQuery,
)
from schemas.warehouses import (
    EditWarehouseRequest,
    NewWarehouseRequest,
    WarehouseListResponse,
    WarehouseProductListResponse,
    WarehouseProductRead,
    WarehouseProductRequest,
    WarehouseProductRequestError,
    WarehouseRead,
)
from services import products as products_service
from services import warehouses as warehouses_service

logger = logging.getLogger(__name__)

router = APIRouter()


def warehouse_not_found(warehouse_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The warehouse with id: {warehouse_id} doesn't exist",
    )


def warehouse_product_not_found(warehouse_id: UUID, product_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The product {product_id} is not stored in warehouse {warehouse_id}",
    )


@router.get("/{warehouse_id}", response_model=WarehouseRead)
async def get_warehouse(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    warehouse = await warehouses_service.find_warehouse_by_id(db, warehouse_id)
    if warehouse is None:
        raise warehouse_not_found(warehouse_id)
    return WarehouseRead(**warehouse.to_schema)


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    page: Pagination = Depends(pagination),
    filter: WarehouseFilterQuery = Depends(filter_query(WarehouseFilterQuery)),
    sort: WarehouseSortQuery = Depends(sort_query(WarehouseSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    warehouses = await warehouses_service.list_warehouses_with_condition(db, filter, sort, page)
    total = await warehouses_service.count_warehouses_with_condition(db, filter)
    return WarehouseListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        warehouses=[WarehouseRead(**w.to_schema) for w in warehouses],
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    payload: NewWarehouseRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    warehouse = await warehouses_service.create_warehouse(db, payload.into_model())
    logger.info("%s added a new warehouse %s - %s", admin, warehouse.id, warehouse.to_schema)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=str(warehouse.id))


@router.put("/{warehouse_id}")
async def edit_warehouse(
    warehouse_id: UUID,
    payload: EditWarehouseRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    changes = payload.into_changes()
    warehouse = await warehouses_service.update_warehouse(db, warehouse_id, changes)
    if warehouse is None:
        raise warehouse_not_found(warehouse_id)
    logger.info('%s successfully edited warehouse "%s" - %s', admin, warehouse_id, warehouse.to_schema)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{warehouse_id}")
async def delete_warehouse(
    warehouse_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    warehouse = await warehouses_service.update_warehouse(db, warehouse_id, {"disabled": True})
    if warehouse is None:
        raise warehouse_not_found(warehouse_id)
    logger.info('%s successfully deleted warehouse "%s"', admin, warehouse_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/{warehouse_id}/product", response_model=WarehouseProductListResponse)
async def list_warehouse_products(
    warehouse_id: UUID,
    page: Pagination = Depends(pagination),
    filter: WarehouseProductFilterQuery = Depends(filter_query(WarehouseProductFilterQuery)),
    sort: WarehouseProductSortQuery = Depends(sort_query(WarehouseProductSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    if await warehouses_service.find_warehouse_by_id(db, warehouse_id) is None:
        raise warehouse_not_found(warehouse_id)

    filter.warehouse_eq = warehouse_id
    filter.warehouse_neq = None
    products = await warehouses_service.list_warehouse_products_with_condition(db, filter, sort, page)
    total = await warehouses_service.count_warehouse_products_with_condition(db, filter)
    return WarehouseProductListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        products=[WarehouseProductRead(**p.to_schema) for p in products],
    )


@router.post("/{warehouse_id}/product/{product_id}", status_code=status.HTTP_201_CREATED)
async def create_warehouse_product(
    warehouse_id: UUID,
    product_id: UUID,
    payload: WarehouseProductRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    quantity = payload.checked_quantity()
    if await warehouses_service.find_warehouse_by_id(db, warehouse_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Warehouse with id "{warehouse_id}" doesn\'t exist.',
        )
    if await products_service.find_product_by_id(db, product_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Product with id "{product_id}" doesn\'t exist.',
        )
    if await warehouses_service.find_warehouse_product(db, warehouse_id, product_id) is not None:
        raise WarehouseProductRequestError(
            "ProductAlreadyInWarehouse",
            f'Product "{product_id}" is already stored in warehouse "{warehouse_id}"',
        )

    result = await warehouses_service.create_warehouse_product(db, warehouse_id, product_id, quantity)
    logger.info(
        "%s added a new warehouse (%s) product (%s) - %s",
        admin, warehouse_id, product_id, result.to_schema,
    )
    return Response(status_code=status.HTTP_201_CREATED)


@router.put("/{warehouse_id}/product/{product_id}")
async def edit_warehouse_product(
    warehouse_id: UUID,
    product_id: UUID,
    payload: WarehouseProductRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    quantity = payload.checked_quantity()
    result = await warehouses_service.update_warehouse_product(db, warehouse_id, product_id, quantity)
    if result is None:
        raise warehouse_product_not_found(warehouse_id, product_id)
    logger.info(
        "%s successfully edited warehouse (%s) product (%s) - %s",
        admin, warehouse_id, product_id, result.to_schema,
    )
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{warehouse_id}/product/{product_id}")
async def delete_warehouse_product(
    warehouse_id: UUID,
    product_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    if not await warehouses_service.delete_warehouse_product(db, warehouse_id, product_id):
        raise warehouse_product_not_found(warehouse_id, product_id)
    logger.info("%s removed product (%s) from warehouse (%s)", admin, product_id, warehouse_id)
    return Response(status_code=status.HTTP_200_OK)
