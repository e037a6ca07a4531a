import uuid
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, SmallInteger, String, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow
from .enums import Currency, Unit, enum_column_type


class Product(Base):
    """Product model - anything sold, or used as an ingredient of a recipe"""
    __tablename__ = "product"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, info={"filter_single": True})
    image = Column(String, nullable=True, info={"filter_skip": True, "sort_skip": True})
    name = Column(String, nullable=False)
    # 0 is last, and the default
    display_order = Column(Integer, nullable=False, default=0, info={"filter_plus_order": True})
    sell_price = Column(
        Numeric(10, 2), nullable=False,
        info={"filter_plus_order": True, "filter_rename": "price", "sort_rename": "price"},
    )
    sell_price_currency = Column(
        enum_column_type(Currency, "currency"), nullable=False, default=Currency.EURO,
        info={"filter_rename": "currency", "sort_skip": True},
    )
    max_quantity_per_command = Column(SmallInteger, nullable=True, info={"filter_skip": True})
    unit = Column(enum_column_type(Unit, "unit"), nullable=False, default=Unit.UNIT)
    # False when the product only exists as an ingredient
    purchasable = Column(Boolean, nullable=False, default=True, info={"filter_single": True})
    hidden = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})
    sma_code = Column(String, nullable=True, unique=True)
    inventree_code = Column(String, nullable=True, unique=True)

    @property
    def to_schema(self):
        """Convert Product model to schema dictionary format"""
        return {
            "id": self.id,
            "image": self.image,
            "name": self.name,
            "display_order": self.display_order,
            "price": float(self.sell_price) if self.sell_price is not None else None,
            "currency": self.sell_price_currency.value if self.sell_price_currency else None,
            "max_quantity_per_command": self.max_quantity_per_command,
            "unit": self.unit.value if self.unit else None,
            "purchasable": self.purchasable,
            "hidden": self.hidden,
            "disabled": self.disabled,
            "sma_code": self.sma_code,
            "inventree_code": self.inventree_code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


ProductFilterQuery = derive_filter_query(Product)
ProductSortQuery = derive_sort_query(Product)
