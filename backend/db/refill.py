import uuid
from sqlalchemy import Boolean, Column, DateTime, Numeric, String, event, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow
from .enums import Currency, enum_column_type


class Refill(Base):
    """Account top-up offer: pay `price` in one currency, receive `credit` in another"""
    __tablename__ = "refill"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, info={"filter_single": True})
    name = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, info={"filter_plus_order": True})
    price_currency = Column(enum_column_type(Currency, "currency"), nullable=False, default=Currency.EURO)
    credit = Column(Numeric(10, 2), nullable=False, info={"filter_plus_order": True})
    credit_currency = Column(enum_column_type(Currency, "currency"), nullable=False, default=Currency.EPICOIN)
    hidden = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    disabled = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "price_currency": self.price_currency.value,
            "credit": float(self.credit),
            "credit_currency": self.credit_currency.value,
            "hidden": self.hidden,
            "disabled": self.disabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@event.listens_for(Refill, "before_insert")
@event.listens_for(Refill, "before_update")
def _hidden_refill_is_disabled(mapper, connection, target):
    if target.hidden:
        target.disabled = True


RefillFilterQuery = derive_filter_query(Refill)
RefillSortQuery = derive_sort_query(Refill)
