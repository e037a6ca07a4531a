from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from core.errors import RequestError, check_name
from db.enums import LocationCategory
from db.location import Location

LOCATION_NAME_MAX_LENGTH = 32


class LocationRequestError(RequestError):
    pass


class LocationRead(BaseModel):
    id: UUID
    name: str
    category: Optional[LocationCategory] = None
    hidden: bool
    disabled: bool
    created_at: str


class LocationListResponse(BaseModel):
    total_page: int
    current_page: int
    locations: List[LocationRead]


class NewLocationRequest(BaseModel):
    name: str
    category: Optional[LocationCategory] = None
    hidden: bool = False

    def into_model(self) -> Location:
        return Location(
            name=check_name(LocationRequestError, self.name, LOCATION_NAME_MAX_LENGTH),
            category=self.category,
            hidden=self.hidden,
            disabled=False,
        )


class EditLocationRequest(BaseModel):
    name: Optional[str] = None
    category: Optional[LocationCategory] = None
    hidden: Optional[bool] = None
    disabled: Optional[bool] = None

    def into_changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        changes = {}
        if data.get("name") is not None:
            changes["name"] = check_name(LocationRequestError, data["name"], LOCATION_NAME_MAX_LENGTH)
        if "category" in data:
            changes["category"] = data["category"]
        for field in ("hidden", "disabled"):
            if data.get(field) is not None:
                changes[field] = data[field]
        return changes
