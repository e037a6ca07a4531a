from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from core.query import Pagination
from db.warehouse import (
    Warehouse,
    WarehouseFilterQuery,
    WarehouseProduct,
    WarehouseProductFilterQuery,
    WarehouseProductSortQuery,
    WarehouseSortQuery,
)
from . import common

ENTITIES = "warehouses"
PRODUCT_ENTITIES = "warehouse_products"


def warehouse_key(warehouse_id) -> str:
    return f"warehouse:{warehouse_id}"


def warehouse_product_key(warehouse_id, product_id) -> str:
    return f"warehouse_product:{warehouse_id}/{product_id}"


async def find_warehouse_by_id(db: AsyncSession, warehouse_id: UUID) -> Optional[Warehouse]:
    return await common.find_by_id(db, Warehouse, warehouse_key(warehouse_id), warehouse_id)


async def list_warehouses_with_condition(
    db: AsyncSession, filter: WarehouseFilterQuery, sort: WarehouseSortQuery, pagination: Pagination
) -> List[Warehouse]:
    return await common.list_with_condition(
        db, Warehouse, ENTITIES, lambda row: warehouse_key(row["id"]), filter, sort, pagination
    )


async def count_warehouses_with_condition(db: AsyncSession, filter: WarehouseFilterQuery) -> int:
    return await common.count_with_condition(db, Warehouse, filter)


async def create_warehouse(db: AsyncSession, warehouse: Warehouse) -> Warehouse:
    db.add(warehouse)
    await db.commit()
    await common.invalidate(None, ENTITIES)
    return warehouse


async def update_warehouse(db: AsyncSession, warehouse_id: UUID, changes: dict) -> Optional[Warehouse]:
    warehouse = await common.update_row(db, Warehouse, warehouse_id, changes)
    await common.invalidate(warehouse_key(warehouse_id), ENTITIES)
    return warehouse


async def delete_warehouse(db: AsyncSession, warehouse_id: UUID) -> bool:
    await db.execute(delete(WarehouseProduct).where(WarehouseProduct.warehouse_id == warehouse_id))
    deleted = await common.delete_row(db, Warehouse, warehouse_id)
    await common.invalidate(warehouse_key(warehouse_id), ENTITIES)
    await common.invalidate(None, PRODUCT_ENTITIES)
    return deleted


async def find_warehouse_product(
    db: AsyncSession, warehouse_id: UUID, product_id: UUID
) -> Optional[WarehouseProduct]:
    return await common.find_by_id(
        db,
        WarehouseProduct,
        warehouse_product_key(warehouse_id, product_id),
        (warehouse_id, product_id),
    )


async def list_warehouse_products_with_condition(
    db: AsyncSession,
    filter: WarehouseProductFilterQuery,
    sort: WarehouseProductSortQuery,
    pagination: Pagination,
) -> List[WarehouseProduct]:
    return await common.list_with_condition(
        db,
        WarehouseProduct,
        PRODUCT_ENTITIES,
        lambda row: warehouse_product_key(row["warehouse_id"], row["product_id"]),
        filter,
        sort,
        pagination,
    )


async def count_warehouse_products_with_condition(
    db: AsyncSession, filter: WarehouseProductFilterQuery
) -> int:
    return await common.count_with_condition(db, WarehouseProduct, filter)


async def create_warehouse_product(
    db: AsyncSession, warehouse_id: UUID, product_id: UUID, quantity: Decimal
) -> WarehouseProduct:
    warehouse_product = WarehouseProduct(
        warehouse_id=warehouse_id, product_id=product_id, quantity=quantity
    )
    db.add(warehouse_product)
    await db.commit()
    await common.invalidate(None, PRODUCT_ENTITIES)
    return warehouse_product


async def update_warehouse_product(
    db: AsyncSession, warehouse_id: UUID, product_id: UUID, quantity: Decimal
) -> Optional[WarehouseProduct]:
    warehouse_product = await common.update_row(
        db, WarehouseProduct, (warehouse_id, product_id), {"quantity": quantity}
    )
    await common.invalidate(warehouse_product_key(warehouse_id, product_id), PRODUCT_ENTITIES)
    return warehouse_product


async def delete_warehouse_product(db: AsyncSession, warehouse_id: UUID, product_id: UUID) -> bool:
    deleted = await common.delete_row(db, WarehouseProduct, (warehouse_id, product_id))
    await common.invalidate(warehouse_product_key(warehouse_id, product_id), PRODUCT_ENTITIES)
    return deleted
