from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class UserRead(BaseModel):
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    is_admin: bool
    is_banned: bool
    created_at: str
    last_access_at: str


class UserListResponse(BaseModel):
    total_page: int
    current_page: int
    users: List[UserRead]


class EditUserRequest(BaseModel):
    is_admin: Optional[bool] = None
    is_banned: Optional[bool] = None

    def into_changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
