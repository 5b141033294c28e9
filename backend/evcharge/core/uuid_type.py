"""
SQLite-compatible UUID type for SQLAlchemy.

Session ids are stored as CHAR(36) strings on every dialect so the same
column definition works against SQLite in tests and PostgreSQL in production.
"""
import uuid
from sqlalchemy import TypeDecorator, String


class UUIDType(TypeDecorator):
    """
    UUID stored as a 36-character string.

    Usage:
        id = Column(UUIDType(), primary_key=True, default=lambda: str(uuid.uuid4()))
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        """Convert Python value to database value."""
        if value is None:
            return None

        if isinstance(value, uuid.UUID):
            return str(value)

        try:
            return str(uuid.UUID(str(value)))
        except (ValueError, AttributeError):
            raise ValueError(f"Cannot convert {value} to UUID")

    def process_result_value(self, value, dialect):
        """Convert database value to Python value."""
        if value is None:
            return None
        return str(value)
