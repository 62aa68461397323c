"""
Key/value settings endpoints backed by the EnvSettings table.
"""

from fastapi import APIRouter, HTTPException, Response, status

from potato_server.dependencies import EnvSettingRepoDep
from potato_server.exceptions import SettingNotFoundError
from potato_server.logging import logger
from potato_server.schemas.env_setting import EnvSettingResponse, EnvSettingValue

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get(
    "",
    response_model=list[EnvSettingResponse],
    summary="List all settings",
)
async def list_settings(repo: EnvSettingRepoDep) -> list[EnvSettingResponse]:
    settings = await repo.get_all()
    return [EnvSettingResponse(key=s.key, value=s.value) for s in settings]


@router.get(
    "/{key}",
    response_model=EnvSettingResponse,
    summary="Get a setting by key",
)
async def get_setting(key: str, repo: EnvSettingRepoDep) -> EnvSettingResponse:
    """
    Get one setting.

    Raises:
        HTTPException: 404 if the key does not exist.
    """
    try:
        setting = await repo.get_by_key(key)
    except SettingNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return EnvSettingResponse(key=setting.key, value=setting.value)


@router.put(
    "/{key}",
    response_model=EnvSettingResponse,
    summary="Create or replace a setting",
)
async def put_setting(
    key: str,
    body: EnvSettingValue,
    repo: EnvSettingRepoDep,
    response: Response,
) -> EnvSettingResponse:
    """
    Create the setting, or replace its value if it exists.

    Responds with 201 when the key was created and 200 when it was updated.
    """
    setting, created = await repo.set_value(key, body.value)
    if created:
        response.status_code = status.HTTP_201_CREATED
    logger.info(f"Setting '{key}' {'created' if created else 'updated'}")
    return EnvSettingResponse(key=setting.key, value=setting.value)


@router.delete(
    "/{key}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a setting",
)
async def delete_setting(key: str, repo: EnvSettingRepoDep) -> None:
    """
    Delete one setting.

    Raises:
        HTTPException: 404 if the key does not exist.
    """
    try:
        await repo.delete_by_key(key)
    except SettingNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    logger.info(f"Setting '{key}' deleted")
