from decimal import Decimal

import pytest
from sqlalchemy.sql.elements import True_
from starlette.datastructures import QueryParams

from core.errors import QueryError
from core.query import Pagination
from db.enums import Currency
from db.product import ProductFilterQuery, ProductSortQuery
from db.recipe import RecipeFilterQuery, RecipeSortQuery
from db.warehouse import WarehouseProductSortQuery


def test_filter_fields_follow_column_annotations():
    fields = ProductFilterQuery.model_fields

    # list parameters
    assert "name_eq" in fields and "name_neq" in fields
    # renamed column with range operators
    assert {"price_eq", "price_neq", "price_gt", "price_lt", "price_gte", "price_lte"} <= set(fields)
    assert "sell_price_eq" not in fields
    assert "currency_eq" in fields
    # skipped columns
    assert "image_eq" not in fields
    assert "max_quantity_per_command_eq" not in fields
    # no range operators without filter_plus_order
    assert "name_gt" not in fields


def test_filter_parses_repeated_and_single_values():
    params = QueryParams("price_eq=1.5&price_eq=2&hidden_eq=false&currency_eq=euro&display_order_gte=3")

    query = ProductFilterQuery.from_query_params(params)

    assert query.price_eq == [Decimal("1.5"), Decimal("2")]
    assert query.hidden_eq is False
    assert query.currency_eq == [Currency.EURO]
    assert query.display_order_gte == 3
    assert query.purchasable_eq is None


def test_filter_rejects_unparsable_values():
    with pytest.raises(QueryError) as exc:
        ProductFilterQuery.from_query_params(QueryParams("display_order_gt=abc"))
    assert exc.value.kind == "InvalidFilter"


def test_empty_filter_is_true():
    query = ProductFilterQuery()

    assert str(query) == "*"
    assert isinstance(query.into_condition(), True_)


def test_filter_condition_uses_the_columns():
    query = ProductFilterQuery.from_query_params(QueryParams("name_neq=Cake&hidden_eq=true&price_lt=4"))

    condition = str(query.into_condition())

    assert "product.name NOT IN" in condition
    assert "product.hidden =" in condition
    assert "product.sell_price <" in condition


def test_filter_str_is_stable():
    query = ProductFilterQuery.from_query_params(QueryParams("hidden_eq=false&name_eq=Cake"))

    assert str(query) == "name_eq=['Cake']&hidden_eq=False"


def test_renamed_foreign_key_filter():
    fields = RecipeFilterQuery.model_fields

    assert "product_eq" in fields
    assert "result_product_id_eq" not in fields


def test_sort_enum_variants():
    values = {member.value for member in ProductSortQuery.sort_enum}

    assert {"price_asc", "price_desc", "name_asc", "display_order_desc"} <= values
    assert "image_asc" not in values
    assert "currency_asc" not in values
    assert "product_asc" in {m.value for m in RecipeSortQuery.sort_enum}
    assert "warehouse_asc" not in {m.value for m in WarehouseProductSortQuery.sort_enum}


def test_sort_order_by_and_str():
    query = ProductSortQuery.from_query_params(QueryParams("sort=price_asc&sort=name_desc"))

    clauses = query.order_by()

    assert str(query) == "price+,name-"
    assert len(clauses) == 2
    assert "product.sell_price ASC NULLS LAST" == str(clauses[0])
    assert "product.name DESC NULLS LAST" == str(clauses[1])


def test_empty_sort():
    query = ProductSortQuery.from_query_params(QueryParams(""))

    assert str(query) == "*"
    assert query.order_by() == []


def test_unknown_sort_is_rejected():
    with pytest.raises(QueryError) as exc:
        ProductSortQuery.from_query_params(QueryParams("sort=image_asc"))
    assert exc.value.kind == "InvalidSort"


@pytest.mark.parametrize(
    "total, per_page, expected",
    [(0, 20, 1), (1, 20, 1), (20, 20, 1), (21, 20, 2), (45, 10, 5)],
)
def test_total_pages(total, per_page, expected):
    assert Pagination(page=0, per_page=per_page).total_pages(total) == expected


def test_pagination_defaults_and_offset():
    page = Pagination()

    assert page.page == 0
    assert page.per_page == 20
    assert Pagination(page=3, per_page=7).offset() == 21
