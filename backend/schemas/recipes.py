from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from core.errors import RequestError, check_name

RECIPE_NAME_MAX_LENGTH = 32


class RecipeRequestError(RequestError):
    pass


class RecipeIngredientRequest(BaseModel):
    product: UUID
    quantity: float
    disabled: Optional[bool] = None

    def checked_quantity(self) -> Decimal:
        if self.quantity <= 0:
            raise RecipeRequestError(
                "QuantityCannotBeNegativeOrNull",
                f'Quantity "{self.quantity}" cannot be null or negative',
            )
        return Decimal(str(self.quantity))


class RecipeIngredientRead(BaseModel):
    product: UUID
    quantity: float
    disabled: bool


class RecipeRead(BaseModel):
    id: UUID
    name: Optional[str] = None
    product: UUID
    ingredients: List[RecipeIngredientRead]
    disabled: bool
    created_at: str


class RecipeListResponse(BaseModel):
    total_page: int
    current_page: int
    recipes: List[RecipeRead]


class NewRecipeRequest(BaseModel):
    name: Optional[str] = None
    product: UUID
    ingredients: List[RecipeIngredientRequest]

    def checked_name(self) -> Optional[str]:
        if self.name is None:
            return None
        return check_name(RecipeRequestError, self.name, RECIPE_NAME_MAX_LENGTH)


class EditRecipeRequest(BaseModel):
    name: Optional[str] = None
    product: Optional[UUID] = None
    # None leaves the ingredients untouched, a list replaces them
    ingredients: Optional[List[RecipeIngredientRequest]] = None
    disabled: Optional[bool] = None

    def into_changes(self) -> dict:
        """Recipe row changes; an explicit null name clears it."""
        data = self.model_dump(exclude_unset=True)
        changes = {}
        if "name" in data:
            name = data["name"]
            changes["name"] = None if name is None else check_name(RecipeRequestError, name, RECIPE_NAME_MAX_LENGTH)
        if data.get("product") is not None:
            changes["result_product_id"] = data["product"]
        if data.get("disabled") is not None:
            changes["disabled"] = data["disabled"]
        return changes
