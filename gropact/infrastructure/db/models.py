"""
SQLAlchemy ORM models
"""
from sqlalchemy import String, Text, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column

from gropact.infrastructure.db.session import Base


class StoreEntry(Base):
    """
    Key/value store: one row per named collection

    value_json хранит всю коллекцию целиком (JSON-текст). Запись всегда
    перезаписывает коллекцию полностью, last write wins.
    """
    __tablename__ = "store_entries"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value_json: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[TIMESTAMP] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
