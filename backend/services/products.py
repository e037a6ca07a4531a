from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.query import Pagination
from db.product import Product, ProductFilterQuery, ProductSortQuery
from . import common

ENTITIES = "products"


def product_key(product_id) -> str:
    return f"product:{product_id}"


async def find_product_by_id(db: AsyncSession, product_id: UUID) -> Optional[Product]:
    return await common.find_by_id(db, Product, product_key(product_id), product_id)


async def list_products_with_condition(
    db: AsyncSession, filter: ProductFilterQuery, sort: ProductSortQuery, pagination: Pagination
) -> List[Product]:
    return await common.list_with_condition(
        db, Product, ENTITIES, lambda row: product_key(row["id"]), filter, sort, pagination
    )


async def count_products_with_condition(db: AsyncSession, filter: ProductFilterQuery) -> int:
    return await common.count_with_condition(db, Product, filter)


async def create_product(db: AsyncSession, product: Product) -> Product:
    db.add(product)
    await db.commit()
    await common.invalidate(None, ENTITIES)
    return product


async def update_product(db: AsyncSession, product_id: UUID, changes: dict) -> Optional[Product]:
    product = await common.update_row(db, Product, product_id, changes)
    await common.invalidate(product_key(product_id), ENTITIES)
    return product


async def delete_product(db: AsyncSession, product_id: UUID) -> bool:
    deleted = await common.delete_row(db, Product, product_id)
    await common.invalidate(product_key(product_id), ENTITIES)
    return deleted
