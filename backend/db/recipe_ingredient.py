from sqlalchemy import Boolean, Column, ForeignKey, Numeric, Uuid

from core.query import derive_filter_query, derive_sort_query
from .database import Base


class RecipeIngredient(Base):
    """Association object between a Recipe and the Products it consumes.
    The (recipe_id, ingredient_id) pair is the primary key, so a product appears once per recipe"""
    __tablename__ = "recipe_ingredients"

    recipe_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("recipe.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
        info={"filter_single": True},
    )
    ingredient_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
    quantity = Column(Numeric(10, 2), nullable=False, info={"filter_plus_order": True})
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})

    @property
    def to_schema(self):
        return {
            "product": self.ingredient_id,
            "quantity": float(self.quantity),
            "disabled": self.disabled,
        }


RecipeIngredientFilterQuery = derive_filter_query(RecipeIngredient)
RecipeIngredientSortQuery = derive_sort_query(RecipeIngredient)
