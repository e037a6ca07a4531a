import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_admin, optional_admin
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.enums import FileType, Unit
from db.product import ProductFilterQuery, ProductSortQuery
from db.users import User
from schemas.products import (
    EditProductRequest,
    NewProductRequest,
    ProductListResponse,
    ProductRead,
    image_does_not_exist,
    resulting_product_must_stay_unit,
)
from services import files as files_service
from services import products as products_service
from services import recipes as recipes_service

logger = logging.getLogger(__name__)

router = APIRouter()


def product_not_found(product_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The product with id: {product_id} doesn't exist",
    )


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    product = await products_service.find_product_by_id(db, product_id)
    if product is None or (product.hidden and admin is None):
        raise product_not_found(product_id)
    return ProductRead(**product.to_schema)


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: Pagination = Depends(pagination),
    filter: ProductFilterQuery = Depends(filter_query(ProductFilterQuery)),
    sort: ProductSortQuery = Depends(sort_query(ProductSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: Optional[User] = Depends(optional_admin),
):
    """Products page. Non admins only ever see purchasable, visible products."""
    if admin is None:
        filter.purchasable_eq = True
        filter.purchasable_neq = None
        filter.hidden_eq = False
        filter.hidden_neq = None

    products = await products_service.list_products_with_condition(db, filter, sort, page)
    total = await products_service.count_products_with_condition(db, filter)
    return ProductListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        products=[ProductRead(**p.to_schema) for p in products],
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: NewProductRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    product = payload.into_model()
    if product.image is not None and not await files_service.file_exists(db, FileType.PRODUCT, product.image):
        raise image_does_not_exist(product.image)

    product = await products_service.create_product(db, product)
    logger.info("%s added a new product %s - %s", admin, product.id, product.to_schema)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=str(product.id))


@router.put("/{product_id}")
async def edit_product(
    product_id: UUID,
    payload: EditProductRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    existing = await products_service.find_product_by_id(db, product_id)
    if existing is None:
        raise product_not_found(product_id)

    changes = payload.into_changes()
    old_image = existing.image
    new_image = changes.get("image")
    if new_image is not None and new_image != old_image:
        if not await files_service.file_exists(db, FileType.PRODUCT, new_image):
            raise image_does_not_exist(new_image)

    new_unit = changes.get("unit")
    if new_unit is not None and new_unit != Unit.UNIT and await recipes_service.is_recipe_result(db, product_id):
        raise resulting_product_must_stay_unit(product_id)

    product = await products_service.update_product(db, product_id, changes)
    if "image" in changes and old_image is not None and old_image != new_image:
        await files_service.delete_file(db, FileType.PRODUCT, old_image)
        logger.info("%s replaced image %s of product %s", admin, old_image, product_id)

    logger.info('%s successfully edited product "%s" - %s', admin, product_id, product.to_schema)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{product_id}")
async def delete_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    product = await products_service.update_product(db, product_id, {"disabled": True})
    if product is None:
        raise product_not_found(product_id)
    logger.info('%s successfully deleted product "%s"', admin, product_id)
    return Response(status_code=status.HTTP_200_OK)
