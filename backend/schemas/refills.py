from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from core.errors import RequestError, check_name
from db.enums import Currency
from db.refill import Refill

REFILL_NAME_MAX_LENGTH = 32


class RefillRequestError(RequestError):
    pass


def check_amount(kind: str, label: str, value: float) -> Decimal:
    if value <= 0:
        raise RefillRequestError(kind, f'{label} "{value}" cannot be null or negative')
    return Decimal(str(value))


def check_price(value: float) -> Decimal:
    return check_amount("PriceCannotBeNegativeOrNull", "Price", value)


def check_credit(value: float) -> Decimal:
    return check_amount("CreditCannotBeNegativeOrNull", "Credit", value)


class RefillRead(BaseModel):
    id: UUID
    name: Optional[str] = None
    price: float
    price_currency: Currency
    credit: float
    credit_currency: Currency
    hidden: bool
    disabled: bool
    created_at: str


class RefillListResponse(BaseModel):
    total_page: int
    current_page: int
    refills: List[RefillRead]


class NewRefillRequest(BaseModel):
    name: Optional[str] = None
    price: float
    price_currency: Currency = Currency.EURO
    credit: float
    credit_currency: Currency = Currency.EPICOIN
    hidden: bool = False

    def into_model(self) -> Refill:
        name = self.name
        if name is not None:
            name = check_name(RefillRequestError, name, REFILL_NAME_MAX_LENGTH)
        return Refill(
            name=name,
            price=check_price(self.price),
            price_currency=self.price_currency,
            credit=check_credit(self.credit),
            credit_currency=self.credit_currency,
            hidden=self.hidden,
            disabled=self.hidden,
        )


class EditRefillRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    price_currency: Optional[Currency] = None
    credit: Optional[float] = None
    credit_currency: Optional[Currency] = None
    hidden: Optional[bool] = None
    disabled: Optional[bool] = None

    def into_changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        changes = {}
        if "name" in data:
            name = data["name"]
            changes["name"] = None if name is None else check_name(RefillRequestError, name, REFILL_NAME_MAX_LENGTH)
        if data.get("price") is not None:
            changes["price"] = check_price(data["price"])
        if data.get("credit") is not None:
            changes["credit"] = check_credit(data["credit"])
        for field in ("price_currency", "credit_currency", "hidden", "disabled"):
            if data.get(field) is not None:
                changes[field] = data[field]
        return changes
