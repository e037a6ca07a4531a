import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_admin
from core.query import Pagination, filter_query, pagination, sort_query
from db.database import get_async_session
from db.recipe import Recipe, RecipeFilterQuery, RecipeSortQuery
from db.users import User
from schemas.recipes import EditRecipeRequest, NewRecipeRequest, RecipeListResponse, RecipeRead
from services import recipes as recipes_service

logger = logging.getLogger(__name__)

router = APIRouter()


def recipe_not_found(recipe_id: UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"The recipe with id: {recipe_id} doesn't exist",
    )


@router.get("/{recipe_id}", response_model=RecipeRead)
async def get_recipe(
    recipe_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    result = await recipes_service.find_recipe_by_id(db, recipe_id)
    if result is None:
        raise recipe_not_found(recipe_id)
    return RecipeRead(**Recipe.schema_with_ingredients(*result))


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    page: Pagination = Depends(pagination),
    filter: RecipeFilterQuery = Depends(filter_query(RecipeFilterQuery)),
    sort: RecipeSortQuery = Depends(sort_query(RecipeSortQuery)),
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    recipes = await recipes_service.list_recipes_with_condition(db, filter, sort, page)
    total = await recipes_service.count_recipes_with_condition(db, filter)
    return RecipeListResponse(
        total_page=page.total_pages(total),
        current_page=page.page,
        recipes=[RecipeRead(**Recipe.schema_with_ingredients(*item)) for item in recipes],
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: NewRecipeRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    recipe = await recipes_service.create_recipe_with_ingredients(db, payload)
    logger.info(
        "%s added a new recipe %s for product %s with %d ingredient(s)",
        admin, recipe.id, recipe.result_product_id, len(payload.ingredients),
    )
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=str(recipe.id))


@router.put("/{recipe_id}")
async def edit_recipe(
    recipe_id: UUID,
    payload: EditRecipeRequest,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    recipe = await recipes_service.reconcile_recipe(db, recipe_id, payload)
    if recipe is None:
        raise recipe_not_found(recipe_id)
    logger.info('%s successfully edited recipe "%s"', admin, recipe_id)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    admin: User = Depends(current_admin),
):
    recipe = await recipes_service.update_recipe(db, recipe_id, {"disabled": True})
    if recipe is None:
        raise recipe_not_found(recipe_id)
    logger.info('%s successfully deleted recipe "%s"', admin, recipe_id)
    return Response(status_code=status.HTTP_200_OK)
