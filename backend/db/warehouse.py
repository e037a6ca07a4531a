import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow


class Warehouse(Base):
    """Warehouse model - a stock location"""
    __tablename__ = "warehouse"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, info={"filter_single": True})
    name = Column(String, nullable=False)
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "disabled": self.disabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class WarehouseProduct(Base):
    """Quantity of a product stored in a warehouse"""
    __tablename__ = "warehouse_products"

    warehouse_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("warehouse.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
        info={"filter_single": True, "filter_rename": "warehouse", "sort_skip": True},
    )
    product_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("product.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
        info={"filter_rename": "product", "sort_rename": "product"},
    )
    quantity = Column(Numeric(10, 2), nullable=False, info={"filter_plus_order": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    @property
    def to_schema(self):
        return {
            "warehouse": self.warehouse_id,
            "product": self.product_id,
            "quantity": float(self.quantity),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


WarehouseFilterQuery = derive_filter_query(Warehouse)
WarehouseSortQuery = derive_sort_query(Warehouse)
WarehouseProductFilterQuery = derive_filter_query(WarehouseProduct)
WarehouseProductSortQuery = derive_sort_query(WarehouseProduct)
