import asyncio
from decimal import Decimal

from conftest import BANNED_ID
from db.database import async_session_maker
from db.enums import FileType, Unit
from db.location import Location
from db.product import Product
from db.refill import Refill
from db.warehouse import Warehouse
from schemas.recipes import NewRecipeRequest
from services import files, locations, products, recipes, refills, users, warehouses


def run(coro_fn):
    async def _run():
        async with async_session_maker() as session:
            return await coro_fn(session)

    return asyncio.run(_run())


def test_raw_deletes(client):
    async def scenario(db):
        cake = await products.create_product(db, Product(name="Cake", sell_price=Decimal("3"), unit=Unit.UNIT))
        egg = await products.create_product(db, Product(name="Egg", sell_price=Decimal("1"), unit=Unit.UNIT))
        recipe = await recipes.create_recipe_with_ingredients(db, NewRecipeRequest(
            product=cake.id, ingredients=[{"product": egg.id, "quantity": 2}],
        ))
        warehouse = await warehouses.create_warehouse(db, Warehouse(name="Central"))
        await warehouses.create_warehouse_product(db, warehouse.id, egg.id, Decimal("12"))
        refill = await refills.create_refill(db, Refill(price=Decimal("5"), credit=Decimal("5")))
        location = await locations.create_location(db, Location(name="Hall"))

        assert await recipes.delete_recipe(db, recipe.id)
        assert await recipes.find_recipe_by_id(db, recipe.id) is None
        assert await warehouses.delete_warehouse(db, warehouse.id)
        assert await warehouses.find_warehouse_product(db, warehouse.id, egg.id) is None
        assert await refills.delete_refill(db, refill.id)
        assert await locations.delete_location(db, location.id)
        assert await products.delete_product(db, egg.id)
        assert await users.delete_user(db, BANNED_ID)

        assert await products.find_product_by_id(db, egg.id) is None
        assert await users.find_user_by_id(db, BANNED_ID) is None
        assert not await products.delete_product(db, egg.id)

    run(scenario)


def test_single_file_storage(client):
    async def scenario(db):
        await files.put_file(db, FileType.PRODUCT, "a.txt", b"hello", "text/plain")
        assert await files.file_exists(db, FileType.PRODUCT, "a.txt")
        assert (await files.get_file(db, FileType.PRODUCT, "a.txt")).content_type == "text/plain"
        assert await files.delete_file(db, FileType.PRODUCT, "a.txt")
        assert not await files.file_exists(db, FileType.PRODUCT, "a.txt")

    run(scenario)
