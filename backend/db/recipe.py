import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow


class Recipe(Base):
    """Recipe model - bill of materials producing one result product"""
    __tablename__ = "recipe"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, info={"filter_single": True})
    result_product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
        info={"filter_single": True, "filter_rename": "product", "sort_rename": "product"},
    )
    name = Column(String, nullable=True)
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    @staticmethod
    def schema_with_ingredients(recipe, ingredients):
        """Recipe dictionary with its ingredients, smallest quantity first"""
        return {
            "id": recipe.id,
            "name": recipe.name,
            "product": recipe.result_product_id,
            "disabled": recipe.disabled,
            "created_at": recipe.created_at.isoformat() if recipe.created_at else None,
            "ingredients": sorted(
                (ingredient.to_schema for ingredient in ingredients),
                key=lambda x: x["quantity"],
            ),
        }


RecipeFilterQuery = derive_filter_query(Recipe)
RecipeSortQuery = derive_sort_query(Recipe)
