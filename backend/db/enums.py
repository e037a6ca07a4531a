import enum

from sqlalchemy import Enum


class Currency(str, enum.Enum):
    EURO = "euro"
    EPICOIN = "epicoin"


class Unit(str, enum.Enum):
    """Unit type of a product: a single piece, or a base unit of mass / volume / length."""
    UNIT = "unit"
    GRAM = "gram"
    LITER = "liter"
    METER = "meter"


class LocationCategory(str, enum.Enum):
    DISPENSER = "dispenser"
    ROOM = "room"


class FileType(str, enum.Enum):
    PRODUCT = "product"


def enum_column_type(enum_class, name: str) -> Enum:
    """Store the lowercase values, not the member names."""
    return Enum(enum_class, name=name, values_callable=lambda e: [m.value for m in e])
