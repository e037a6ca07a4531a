from decimal import Decimal

import pytest

from core.errors import RequestError
from db.enums import Currency, Unit
from schemas.locations import NewLocationRequest
from schemas.products import EditProductRequest, NewProductRequest, ProductRequestError
from schemas.recipes import EditRecipeRequest, NewRecipeRequest, RecipeRequestError
from schemas.refills import EditRefillRequest, NewRefillRequest, RefillRequestError
from schemas.warehouses import NewWarehouseRequest, WarehouseProductRequest, WarehouseProductRequestError


def test_new_product_into_model():
    product = NewProductRequest(name="Cake", price=2.5, max_quantity_per_command=3, unit=Unit.GRAM).into_model()

    assert product.name == "Cake"
    assert product.sell_price == Decimal("2.5")
    assert product.sell_price_currency == Currency.EURO
    assert product.unit == Unit.GRAM
    assert product.disabled is False


@pytest.mark.parametrize(
    "body, kind",
    [
        ({"name": "", "price": 1}, "NameCannotBeEmpty"),
        ({"name": "x" * 33, "price": 1}, "NameCannotBeLongerThan"),
        ({"name": "Cake", "price": 0}, "PriceCannotBeNegativeOrNull"),
        ({"name": "Cake", "price": -2}, "PriceCannotBeNegativeOrNull"),
        ({"name": "Cake", "price": 1, "max_quantity_per_command": 11}, "MaxQuantityPerCommandCannotBeBiggerThan"),
    ],
)
def test_new_product_rejections(body, kind):
    with pytest.raises(ProductRequestError) as exc:
        NewProductRequest(**body).into_model()
    assert exc.value.kind == kind


def test_name_of_max_length_is_accepted():
    assert NewWarehouseRequest(name="x" * 32).into_model().name == "x" * 32


def test_edit_product_distinguishes_absent_and_null():
    changes = EditProductRequest.model_validate({"image": None, "price": 3}).into_changes()

    assert changes == {"image": None, "sell_price": Decimal("3")}
    assert EditProductRequest.model_validate({}).into_changes() == {}


def test_request_error_response_body():
    error = RequestError("NameCannotBeEmpty", "Name cannot be empty")

    assert error.to_response() == {
        "status": 400,
        "error": "Bad Request",
        "kind": "NameCannotBeEmpty",
        "message": "Name cannot be empty",
    }


def test_recipe_name_rules():
    request = NewRecipeRequest.model_validate({
        "name": "",
        "product": "10000000-0000-4000-8000-00000000000a",
        "ingredients": [],
    })
    with pytest.raises(RecipeRequestError) as exc:
        request.checked_name()
    assert exc.value.kind == "NameCannotBeEmpty"

    changes = EditRecipeRequest.model_validate({"name": None, "disabled": True}).into_changes()
    assert changes == {"name": None, "disabled": True}


def test_refill_amounts_must_be_positive():
    with pytest.raises(RefillRequestError) as exc:
        NewRefillRequest(price=1, credit=0).into_model()
    assert exc.value.kind == "CreditCannotBeNegativeOrNull"

    with pytest.raises(RefillRequestError) as exc:
        EditRefillRequest(price=-1).into_changes()
    assert exc.value.kind == "PriceCannotBeNegativeOrNull"


def test_hidden_refill_starts_disabled():
    refill = NewRefillRequest(price=10, credit=12, hidden=True).into_model()

    assert refill.hidden is True
    assert refill.disabled is True


def test_location_name_is_checked():
    with pytest.raises(RequestError) as exc:
        NewLocationRequest(name="").into_model()
    assert exc.value.kind == "NameCannotBeEmpty"


def test_warehouse_product_quantity():
    assert WarehouseProductRequest(quantity=0).checked_quantity() == Decimal("0")
    with pytest.raises(WarehouseProductRequestError) as exc:
        WarehouseProductRequest(quantity=-0.5).checked_quantity()
    assert exc.value.kind == "QuantityCannotBeNegative"
