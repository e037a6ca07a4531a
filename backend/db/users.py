from sqlalchemy import Boolean, Column, DateTime, String, event, Uuid
from core.query import derive_filter_query, derive_sort_query
from .database import Base, utcnow


class User(Base):
    """Application user, keyed by the OpenID Connect subject"""
    __tablename__ = "user"

    id = Column(Uuid(as_uuid=True), primary_key=True, info={"filter_single": True})
    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    username = Column(String, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    is_banned = Column(Boolean, nullable=False, default=False, info={"filter_single": True})
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})
    last_access_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, info={"filter_plus_order": True})

    def __str__(self):
        label = self.name or self.email or self.username
        if label:
            return f'User {self.id} "{label}"'
        return f"User {self.id}"

    @property
    def to_schema(self):
        """Convert User model to schema dictionary format"""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "username": self.username,
            "is_admin": self.is_admin,
            "is_banned": self.is_banned,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_access_at": self.last_access_at.isoformat() if self.last_access_at else None,
        }


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _banned_user_is_not_admin(mapper, connection, target):
    if target.is_banned:
        target.is_admin = False


UserFilterQuery = derive_filter_query(User)
UserSortQuery = derive_sort_query(User)
