"""
DualStore API - Resource SQLAlchemy Model
==========================================

What:  ORM model representing the `resources` table in PostgreSQL.
How:   Inherits from the shared DeclarativeBase; `ensure_schema()` creates
       the table from this metadata at startup when it does not exist yet.
Who:   Used by PostgresResourceStore for every relational operation.

Table:
    CREATE TABLE IF NOT EXISTS resources (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        description TEXT
    )
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dualstore.database import Base


class Resource(Base):
    """
    A resource row. Ids come from the table's sequence and are never reused
    after a delete.
    """

    __tablename__ = "resources"
    # AUTOINCREMENT keyword on SQLite so deleted ids are not handed out again;
    # ignored by PostgreSQL, where SERIAL already behaves this way.
    __table_args__ = {"sqlite_autoincrement": True}

    # SERIAL on PostgreSQL
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Nullable at the column level to match existing deployments of the table;
    # the API always writes a string.
    description: Mapped[str] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, name='{self.name}')>"
