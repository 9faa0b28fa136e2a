from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base


class StoredDocument(Base):
    """One whole-collection document, serialized as JSON text.

    ``version`` increases by one on every write and backs compare-and-swap.
    ``schema_version`` tags the layout of ``body`` for future migrations.
    """

    __tablename__ = "documents"

    key = Column(String(255), primary_key=True)
    body = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    schema_version = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
