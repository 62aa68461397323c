"""
Repository for the EnvSetting key/value table.

Example:
    ```python
    async with async_session() as session:
        repo = EnvSettingRepository(session)
        await repo.set_value("feature_x", "on")
        setting = await repo.get_by_key("feature_x")
        await session.commit()
    ```
"""

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from potato_server.exceptions import SettingNotFoundError
from potato_server.models.env_setting import EnvSetting
from potato_server.repositories.base import BaseRepository


class EnvSettingRepository(BaseRepository[EnvSetting]):
    """
    Repository for EnvSetting operations addressed by key.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, EnvSetting)

    async def find_by_key(self, key: str) -> EnvSetting | None:
        """
        Get setting by exact key, or None if absent.
        """
        stmt = select(EnvSetting).where(EnvSetting.key == key)
        result = await self.session.exec(stmt)
        return result.first()

    async def get_by_key(self, key: str) -> EnvSetting:
        """
        Get setting by exact key.

        Raises:
            SettingNotFoundError: If no setting has this key.
        """
        setting = await self.find_by_key(key)
        if setting is None:
            raise SettingNotFoundError(key)
        return setting

    async def set_value(self, key: str, value: str) -> tuple[EnvSetting, bool]:
        """
        Create the setting or replace its value.

        Args:
            key: Setting name.
            value: New value.

        Returns:
            The stored setting and whether it was newly created.
        """
        setting = await self.find_by_key(key)
        created = setting is None
        if created:
            setting = EnvSetting(key=key, value=value)
        else:
            setting.value = value
        return await self.save(setting), created

    async def delete_by_key(self, key: str) -> None:
        """
        Delete setting by key.

        Raises:
            SettingNotFoundError: If no setting has this key.
        """
        await self.delete(await self.get_by_key(key))
