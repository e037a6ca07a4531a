import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow
from .enums import LocationCategory, enum_column_type


class Location(Base):
    """A dispenser or a room where products can be picked up"""
    __tablename__ = "location"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, info={"filter_single": True})
    name = Column(String, nullable=False, unique=True)
    category = Column(enum_column_type(LocationCategory, "location_category"), nullable=True)
    hidden = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value if self.category else None,
            "hidden": self.hidden,
            "disabled": self.disabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


LocationFilterQuery = derive_filter_query(Location)
LocationSortQuery = derive_sort_query(Location)
