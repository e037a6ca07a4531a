from sqlalchemy import Column, DateTime, LargeBinary, String
from .database import Base, utcnow


class StoredFile(Base):
    """Uploaded file binary, keyed by "<file_type>/<filename>"."""
    __tablename__ = "files"

    key = Column(String, primary_key=True)
    data = Column(LargeBinary, nullable=False)
    content_type = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    @staticmethod
    def make_key(file_type, filename: str) -> str:
        return f"{getattr(file_type, 'value', file_type)}/{filename}"
