"""
Filter / sort query derivation.

Column declarations carry their query behaviour in `Column(..., info={...})`:

- ``filter_skip``: no filter parameters for the column
- ``filter_single``: ``<stem>_eq`` / ``<stem>_neq`` take one value instead of a list
- ``filter_plus_order``: adds ``<stem>_gt``, ``<stem>_lt``, ``<stem>_gte``, ``<stem>_lte``
- ``filter_override``: python type used to parse the parameter values
- ``filter_rename``: public stem of the parameters (defaults to the column name)
- ``sort_skip``: no sort variants for the column
- ``sort_rename``: public stem of the sort variants

`derive_filter_query(Model)` builds ``<Model>FilterQuery`` and
`derive_sort_query(Model)` builds ``<Model>SortQuery`` / ``<Model>SortEnum``.
"""

import enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model
from sqlalchemy import and_, true

from core.config import settings
from core.errors import QueryError

FILTER_SKIP = "filter_skip"
FILTER_SINGLE = "filter_single"
FILTER_PLUS_ORDER = "filter_plus_order"
FILTER_OVERRIDE = "filter_override"
FILTER_RENAME = "filter_rename"
SORT_SKIP = "sort_skip"
SORT_RENAME = "sort_rename"

OPERATORS = {
    "eq": lambda column, value: column.in_(value) if isinstance(value, list) else column == value,
    "neq": lambda column, value: column.not_in(value) if isinstance(value, list) else column != value,
    "gt": lambda column, value: column > value,
    "lt": lambda column, value: column < value,
    "gte": lambda column, value: column >= value,
    "lte": lambda column, value: column <= value,
}

RANGE_OPERATORS = ("gt", "lt", "gte", "lte")


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _column_python_type(column):
    override = column.info.get(FILTER_OVERRIDE)
    if override is not None:
        return override
    enum_class = getattr(column.type, "enum_class", None)
    if enum_class is not None:
        return enum_class
    return column.type.python_type


class FilterQuery(BaseModel):
    """Base class of the generated ``<Model>FilterQuery`` classes."""

    model_config = ConfigDict(extra="ignore")

    # (parameter name, operator, column)
    filters: ClassVar[Tuple[Tuple[str, str, Any], ...]] = ()
    list_params: ClassVar[frozenset] = frozenset()

    @classmethod
    def from_query_params(cls, params) -> "FilterQuery":
        data = {}
        for name, _op, _column in cls.filters:
            if name not in params:
                continue
            if name in cls.list_params:
                data[name] = params.getlist(name)
            else:
                data[name] = params.get(name)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise QueryError("InvalidFilter", _validation_message(exc))

    def into_condition(self):
        clauses = []
        for name, op, column in self.filters:
            value = getattr(self, name)
            if value is None or (isinstance(value, list) and not value):
                continue
            clauses.append(OPERATORS[op](column, value))
        if not clauses:
            return true()
        return and_(*clauses)

    def __str__(self) -> str:
        res = []
        for name, _op, _column in self.filters:
            value = getattr(self, name)
            if value is None or (isinstance(value, list) and not value):
                continue
            if isinstance(value, list):
                value = [_display(v) for v in value]
            else:
                value = _display(value)
            res.append(f"{name}={value!r}")
        return "&".join(res) if res else "*"


def _display(value):
    if isinstance(value, enum.Enum):
        return value.value
    return value


def derive_filter_query(model) -> type:
    """Build the ``<Model>FilterQuery`` class of an ORM model."""
    fields: Dict[str, Any] = {}
    filters = []
    list_params = set()

    for column in model.__table__.columns:
        info = column.info
        if info.get(FILTER_SKIP):
            continue

        field_type = _column_python_type(column)
        stem = info.get(FILTER_RENAME, column.key)
        eq_name = f"{stem}_eq"
        neq_name = f"{stem}_neq"

        if info.get(FILTER_SINGLE):
            fields[eq_name] = (Optional[field_type], None)
            fields[neq_name] = (Optional[field_type], None)
        else:
            fields[eq_name] = (List[field_type], Field(default_factory=list))
            fields[neq_name] = (List[field_type], Field(default_factory=list))
            list_params.update((eq_name, neq_name))

        filters.append((eq_name, "eq", column))
        filters.append((neq_name, "neq", column))

        if info.get(FILTER_PLUS_ORDER):
            for op in RANGE_OPERATORS:
                name = f"{stem}_{op}"
                fields[name] = (Optional[field_type], None)
                filters.append((name, op, column))

    query_cls = create_model(f"{model.__name__}FilterQuery", __base__=FilterQuery, **fields)
    query_cls.filters = tuple(filters)
    query_cls.list_params = frozenset(list_params)
    return query_cls


class SortQuery(BaseModel):
    """Base class of the generated ``<Model>SortQuery`` classes."""

    # enum value -> (stem, column, ascending)
    variants: ClassVar[Dict[str, Tuple[str, Any, bool]]] = {}
    sort_enum: ClassVar[Any] = None

    @classmethod
    def from_query_params(cls, params) -> "SortQuery":
        try:
            return cls.model_validate({"sort": params.getlist("sort")})
        except ValidationError as exc:
            raise QueryError("InvalidSort", _validation_message(exc))

    def order_by(self) -> list:
        clauses = []
        for item in self.sort:
            _stem, column, ascending = self.variants[item.value]
            clause = column.asc() if ascending else column.desc()
            clauses.append(clause.nulls_last())
        return clauses

    def __str__(self) -> str:
        res = []
        for item in self.sort:
            stem, _column, ascending = self.variants[item.value]
            res.append(f"{stem}{'+' if ascending else '-'}")
        return ",".join(res) if res else "*"


def derive_sort_query(model) -> type:
    """Build the ``<Model>SortQuery`` class (and its ``<Model>SortEnum``) of an ORM model."""
    members = {}
    variants = {}
    for column in model.__table__.columns:
        info = column.info
        if info.get(SORT_SKIP):
            continue
        stem = info.get(SORT_RENAME, column.key)
        members[f"{stem}_asc"] = f"{stem}_asc"
        members[f"{stem}_desc"] = f"{stem}_desc"
        variants[f"{stem}_asc"] = (stem, column, True)
        variants[f"{stem}_desc"] = (stem, column, False)

    sort_enum = enum.Enum(f"{model.__name__}SortEnum", members, type=str)
    query_cls = create_model(
        f"{model.__name__}SortQuery",
        __base__=SortQuery,
        sort=(List[sort_enum], Field(default_factory=list)),
    )
    query_cls.variants = variants
    query_cls.sort_enum = sort_enum
    return query_cls


class Pagination(BaseModel):
    page: int = Field(0, ge=0)
    per_page: int = Field(default_factory=lambda: settings.default_per_page, ge=1)

    def offset(self) -> int:
        return self.page * self.per_page

    def total_pages(self, total: int) -> int:
        return ((max(total, 1) - 1) // self.per_page) + 1


def pagination(request: Request) -> Pagination:
    data = {k: request.query_params[k] for k in ("page", "per_page") if k in request.query_params}
    try:
        return Pagination.model_validate(data)
    except ValidationError as exc:
        raise QueryError("InvalidPagination", _validation_message(exc))


def filter_query(query_cls):
    """FastAPI dependency parsing ``query_cls`` out of the query string."""

    def dependency(request: Request):
        return query_cls.from_query_params(request.query_params)

    return dependency


def sort_query(query_cls):
    """FastAPI dependency parsing ``query_cls`` out of the query string."""

    def dependency(request: Request):
        return query_cls.from_query_params(request.query_params)

    return dependency
