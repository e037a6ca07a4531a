from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from core.errors import RequestError, check_name
from db.warehouse import Warehouse

WAREHOUSE_NAME_MAX_LENGTH = 32


class WarehouseRequestError(RequestError):
    pass


class WarehouseProductRequestError(RequestError):
    pass


class WarehouseRead(BaseModel):
    id: UUID
    name: str
    disabled: bool
    created_at: str


class WarehouseListResponse(BaseModel):
    total_page: int
    current_page: int
    warehouses: List[WarehouseRead]


class WarehouseProductRead(BaseModel):
    warehouse: UUID
    product: UUID
    quantity: float
    created_at: str


class WarehouseProductListResponse(BaseModel):
    total_page: int
    current_page: int
    products: List[WarehouseProductRead]


class NewWarehouseRequest(BaseModel):
    name: str

    def into_model(self) -> Warehouse:
        return Warehouse(
            name=check_name(WarehouseRequestError, self.name, WAREHOUSE_NAME_MAX_LENGTH),
            disabled=False,
        )


class EditWarehouseRequest(BaseModel):
    name: Optional[str] = None
    disabled: Optional[bool] = None

    def into_changes(self) -> dict:
        changes = {}
        if self.name is not None:
            changes["name"] = check_name(WarehouseRequestError, self.name, WAREHOUSE_NAME_MAX_LENGTH)
        if self.disabled is not None:
            changes["disabled"] = self.disabled
        return changes


class WarehouseProductRequest(BaseModel):
    quantity: float

    def checked_quantity(self) -> Decimal:
        if self.quantity < 0:
            raise WarehouseProductRequestError("QuantityCannotBeNegative", "Quantity cannot be negative.")
        return Decimal(str(self.quantity))
