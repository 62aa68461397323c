from pydantic import BaseModel, Field


class EnvSettingValue(BaseModel):
    """Request body for creating or replacing a setting."""

    value: str = Field(..., description="Setting value")


class EnvSettingResponse(BaseModel):
    """Setting as returned by the settings API."""

    key: str
    value: str
