"""
Base model for all database tables with async attribute support.
"""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlmodel import SQLModel


class BaseModel(SQLModel, AsyncAttrs):  # type: ignore[misc]
    """
    Base model for all database tables.

    Combines SQLModel with SQLAlchemy's AsyncAttrs mixin so lazy-loaded
    attributes can be awaited via `awaitable_attrs` in async contexts.
    """

    pass
