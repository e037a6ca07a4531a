from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from core.errors import RequestError, check_name
from db.enums import Currency, Unit
from db.product import Product

PRODUCT_NAME_MAX_LENGTH = 32
PRODUCT_MAX_QUANTITY_PER_COMMAND = 10


class ProductRequestError(RequestError):
    pass


def check_price(price: float) -> Decimal:
    if price <= 0:
        raise ProductRequestError(
            "PriceCannotBeNegativeOrNull", f'Price "{price}" cannot be null or negative'
        )
    return Decimal(str(price))


def check_max_quantity_per_command(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if value < 0 or value > PRODUCT_MAX_QUANTITY_PER_COMMAND:
        raise ProductRequestError(
            "MaxQuantityPerCommandCannotBeBiggerThan",
            f'Max Quantity Per Command "{value}" cannot be bigger than {PRODUCT_MAX_QUANTITY_PER_COMMAND}',
        )
    return value


def image_does_not_exist(image: str) -> ProductRequestError:
    return ProductRequestError("ImageDoesNotExist", f'Image "{image}" doesn\'t exist in file storage')


def resulting_product_must_stay_unit(product_id) -> ProductRequestError:
    return ProductRequestError(
        "ResultingProductMustStayUnit",
        f'Product "{product_id}" is the result of a recipe, its unit must stay "unit"',
    )


class ProductRead(BaseModel):
    id: UUID
    image: Optional[str] = None
    name: str
    display_order: int
    price: float
    currency: Currency
    max_quantity_per_command: Optional[int] = None
    unit: Unit
    purchasable: bool
    hidden: bool
    disabled: bool
    sma_code: Optional[str] = None
    inventree_code: Optional[str] = None
    created_at: str


class ProductListResponse(BaseModel):
    total_page: int
    current_page: int
    products: List[ProductRead]


class NewProductRequest(BaseModel):
    image: Optional[str] = None
    name: str
    price: float
    currency: Currency = Currency.EURO
    display_order: int = 0
    max_quantity_per_command: Optional[int] = None
    unit: Unit = Unit.UNIT
    purchasable: bool = True
    hidden: bool = False
    sma_code: Optional[str] = None
    inventree_code: Optional[str] = None

    def into_model(self) -> Product:
        return Product(
            image=self.image,
            name=check_name(ProductRequestError, self.name, PRODUCT_NAME_MAX_LENGTH),
            sell_price=check_price(self.price),
            sell_price_currency=self.currency,
            display_order=self.display_order,
            max_quantity_per_command=check_max_quantity_per_command(self.max_quantity_per_command),
            unit=self.unit,
            purchasable=self.purchasable,
            hidden=self.hidden,
            disabled=False,
            sma_code=self.sma_code,
            inventree_code=self.inventree_code,
        )


class EditProductRequest(BaseModel):
    image: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[Currency] = None
    display_order: Optional[int] = None
    max_quantity_per_command: Optional[int] = None
    unit: Optional[Unit] = None
    purchasable: Optional[bool] = None
    hidden: Optional[bool] = None
    disabled: Optional[bool] = None
    sma_code: Optional[str] = None
    inventree_code: Optional[str] = None

    def into_changes(self) -> dict:
        """Column values to update; fields absent from the body are left alone, explicit nulls clear nullable columns."""
        data = self.model_dump(exclude_unset=True)
        changes = {}
        for field in ("image", "sma_code", "inventree_code"):
            if field in data:
                changes[field] = data[field]
        if "max_quantity_per_command" in data:
            changes["max_quantity_per_command"] = check_max_quantity_per_command(data["max_quantity_per_command"])
        if data.get("name") is not None:
            changes["name"] = check_name(ProductRequestError, data["name"], PRODUCT_NAME_MAX_LENGTH)
        if data.get("price") is not None:
            changes["sell_price"] = check_price(data["price"])
        if data.get("currency") is not None:
            changes["sell_price_currency"] = data["currency"]
        for field in ("display_order", "unit", "purchasable", "hidden", "disabled"):
            if data.get(field) is not None:
                changes[field] = data[field]
        return changes
