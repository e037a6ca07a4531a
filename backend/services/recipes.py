"""
Recipes and the reconciliation of their ingredient rows.

A submitted ingredient list is merged by product, checked against the
products table, then diffed against the stored rows of the recipe:

* products only in the submission are added,
* products in both have their quantity / disabled flag updated,
* products only in the database are removed.

Every check runs before the first write and all the writes of one request
are committed together.
"""

from decimal import Decimal
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import DEFAULT_TTL, cache, dump_row, load_row
from core.query import Pagination
from db.enums import Unit
from db.recipe import Recipe, RecipeFilterQuery, RecipeSortQuery
from db.recipe_ingredient import RecipeIngredient
from schemas.recipes import EditRecipeRequest, NewRecipeRequest, RecipeIngredientRequest, RecipeRequestError
from . import common
from .products import find_product_by_id

ENTITIES = "recipes"


class MergedIngredient(NamedTuple):
    product: UUID
    quantity: Decimal
    disabled: bool


def recipe_key(recipe_id) -> str:
    return f"recipe:{recipe_id}"


def merge_ingredients(entries: Iterable[RecipeIngredientRequest]) -> List[MergedIngredient]:
    """Collapse entries referencing the same product: quantities are summed and
    `disabled` is the AND of the flags that were given. A missing flag does not
    take part in the AND; with no flag at all the ingredient is enabled.
    First appearance order is kept."""
    merged = {}
    for entry in entries:
        quantity = entry.checked_quantity()
        current = merged.get(entry.product)
        if current is None:
            merged[entry.product] = (quantity, entry.disabled)
            continue
        total, disabled = current
        if entry.disabled is not None:
            disabled = entry.disabled if disabled is None else disabled and entry.disabled
        merged[entry.product] = (total + quantity, disabled)
    return [
        MergedIngredient(product, quantity, bool(disabled))
        for product, (quantity, disabled) in merged.items()
    ]


def partition_ingredients(
    merged: Sequence[MergedIngredient], existing_ids: Iterable[UUID]
) -> Tuple[List[MergedIngredient], List[MergedIngredient], List[UUID]]:
    """Split merged ingredients into (to_add, to_update, to_remove_ids)."""
    existing_ids = list(existing_ids)
    existing = set(existing_ids)
    merged_ids = {ingredient.product for ingredient in merged}

    to_add = [ingredient for ingredient in merged if ingredient.product not in existing]
    to_update = [ingredient for ingredient in merged if ingredient.product in existing]
    to_remove = [product_id for product_id in existing_ids if product_id not in merged_ids]
    return to_add, to_update, to_remove


async def validate_recipe_products(
    db: AsyncSession,
    result_product_id: UUID,
    ingredients: Iterable[UUID],
    check_result: bool = True,
):
    """Raise a RecipeRequestError if the recipe would reference a missing or invalid product."""
    if check_result:
        product = await find_product_by_id(db, result_product_id)
        if product is None:
            raise RecipeRequestError(
                "ProductCannotBeFound", f'Product "{result_product_id}" cannot be found'
            )
        if product.unit != Unit.UNIT:
            raise RecipeRequestError(
                "ResultingProductIsNotUnit",
                f'Product "{result_product_id}" must use the "unit" unit to be the result of a recipe',
            )

    for product_id in ingredients:
        if product_id == result_product_id:
            raise RecipeRequestError(
                "IngredientCannotBeResultingProduct",
                f'Ingredient "{product_id}" cannot be the resulting product of its recipe',
            )
        if await find_product_by_id(db, product_id) is None:
            raise RecipeRequestError(
                "IngredientCannotBeFound", f'Ingredient "{product_id}" cannot be found'
            )


async def _load_ingredients(db: AsyncSession, recipe_ids: Sequence[UUID]) -> dict:
    grouped = {recipe_id: [] for recipe_id in recipe_ids}
    if not recipe_ids:
        return grouped
    result = await db.execute(
        select(RecipeIngredient).where(RecipeIngredient.recipe_id.in_(recipe_ids))
    )
    for row in result.scalars().all():
        grouped[row.recipe_id].append(row)
    return grouped


def _dump_recipe(recipe: Recipe, ingredients: Sequence[RecipeIngredient]) -> dict:
    return {
        "recipe": dump_row(recipe),
        "ingredients": [dump_row(ingredient) for ingredient in ingredients],
    }


def _load_recipe(data: dict) -> Tuple[Recipe, List[RecipeIngredient]]:
    return (
        load_row(Recipe, data["recipe"]),
        [load_row(RecipeIngredient, ingredient) for ingredient in data["ingredients"]],
    )


async def find_recipe_by_id(
    db: AsyncSession, recipe_id: UUID
) -> Optional[Tuple[Recipe, List[RecipeIngredient]]]:
    key = recipe_key(recipe_id)
    cached = await cache.get(key)
    if cached is not None:
        return _load_recipe(cached)

    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        return None
    ingredients = (await _load_ingredients(db, [recipe_id]))[recipe_id]
    await cache.set(key, _dump_recipe(recipe, ingredients))
    return recipe, ingredients


async def list_recipes_with_condition(
    db: AsyncSession, filter: RecipeFilterQuery, sort: RecipeSortQuery, pagination: Pagination
) -> List[Tuple[Recipe, List[RecipeIngredient]]]:
    key = common.list_key(ENTITIES, filter, sort, pagination)
    cached = await cache.mget_list(key)
    if cached is not None:
        return [_load_recipe(data) for data in cached]

    result = await db.execute(common.select_page(Recipe, filter, sort, pagination))
    recipes = result.scalars().all()
    grouped = await _load_ingredients(db, [recipe.id for recipe in recipes])
    items = [(recipe, grouped[recipe.id]) for recipe in recipes]
    await cache.mset_list(
        key,
        [_dump_recipe(recipe, ingredients) for recipe, ingredients in items],
        DEFAULT_TTL,
        lambda data: recipe_key(data["recipe"]["id"]),
    )
    return items


async def count_recipes_with_condition(db: AsyncSession, filter: RecipeFilterQuery) -> int:
    return await common.count_with_condition(db, Recipe, filter)


async def is_recipe_result(db: AsyncSession, product_id: UUID) -> bool:
    result = await db.execute(select(Recipe.id).where(Recipe.result_product_id == product_id).limit(1))
    return result.scalar_one_or_none() is not None


async def add_recipe_ingredient(
    db: AsyncSession, recipe_id: UUID, ingredient: MergedIngredient
) -> RecipeIngredient:
    row = RecipeIngredient(
        recipe_id=recipe_id,
        ingredient_id=ingredient.product,
        quantity=ingredient.quantity,
        disabled=ingredient.disabled,
    )
    db.add(row)
    return row


async def update_recipe_ingredient(
    db: AsyncSession, recipe_id: UUID, ingredient: MergedIngredient
) -> Optional[RecipeIngredient]:
    row = await db.get(RecipeIngredient, (recipe_id, ingredient.product))
    if row is not None:
        row.quantity = ingredient.quantity
        row.disabled = ingredient.disabled
    return row


async def delete_recipe_ingredient(db: AsyncSession, recipe_id: UUID, ingredient_id: UUID):
    row = await db.get(RecipeIngredient, (recipe_id, ingredient_id))
    if row is not None:
        await db.delete(row)


async def create_recipe_with_ingredients(db: AsyncSession, request: NewRecipeRequest) -> Recipe:
    name = request.checked_name()
    merged = merge_ingredients(request.ingredients)
    await validate_recipe_products(db, request.product, [i.product for i in merged])

    recipe = Recipe(name=name, result_product_id=request.product, disabled=False)
    try:
        db.add(recipe)
        await db.flush()
        for ingredient in merged:
            await add_recipe_ingredient(db, recipe.id, ingredient)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    await common.invalidate(None, ENTITIES)
    return recipe


async def reconcile_recipe(
    db: AsyncSession, recipe_id: UUID, request: EditRecipeRequest
) -> Optional[Recipe]:
    """Apply an edit request to a recipe and its ingredient rows. None if the recipe doesn't exist."""
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        return None

    changes = request.into_changes()
    result = await db.execute(select(RecipeIngredient).where(RecipeIngredient.recipe_id == recipe_id))
    existing_ids = [row.ingredient_id for row in result.scalars().all()]

    merged = merge_ingredients(request.ingredients) if request.ingredients is not None else None
    result_product_id = changes.get("result_product_id", recipe.result_product_id)
    ingredient_ids = [i.product for i in merged] if merged is not None else existing_ids
    await validate_recipe_products(
        db,
        result_product_id,
        ingredient_ids,
        check_result=result_product_id != recipe.result_product_id,
    )

    try:
        for field, value in changes.items():
            setattr(recipe, field, value)
        if merged is not None:
            to_add, to_update, to_remove = partition_ingredients(merged, existing_ids)
            for ingredient_id in to_remove:
                await delete_recipe_ingredient(db, recipe_id, ingredient_id)
            for ingredient in to_update:
                await update_recipe_ingredient(db, recipe_id, ingredient)
            for ingredient in to_add:
                await add_recipe_ingredient(db, recipe_id, ingredient)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    await common.invalidate(recipe_key(recipe_id), ENTITIES)
    return recipe


async def update_recipe(db: AsyncSession, recipe_id: UUID, changes: dict) -> Optional[Recipe]:
    recipe = await common.update_row(db, Recipe, recipe_id, changes)
    await common.invalidate(recipe_key(recipe_id), ENTITIES)
    return recipe


async def delete_recipe(db: AsyncSession, recipe_id: UUID) -> bool:
    recipe = await db.get(Recipe, recipe_id)
    if recipe is None:
        return False
    await db.execute(delete(RecipeIngredient).where(RecipeIngredient.recipe_id == recipe_id))
    await db.delete(recipe)
    await db.commit()
    await common.invalidate(recipe_key(recipe_id), ENTITIES)
    return True
