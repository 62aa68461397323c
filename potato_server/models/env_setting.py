from sqlmodel import Field

from potato_server.models.base import BaseModel


class EnvSetting(BaseModel, table=True):
    """
    Key/value environment setting persisted in the settings store.

    Attributes:
        id: Primary key identifier
        key: Unique setting name
        value: Setting value as text
    """

    __tablename__ = "envsettings"
    __table_args__ = {"extend_existing": True}

    id: int | None = Field(default=None, primary_key=True)
    key: str = Field(index=True, unique=True)
    value: str
