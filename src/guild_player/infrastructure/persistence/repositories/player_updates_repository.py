"""SQLite implementation of the player-updates settings repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from guild_player.domain.music.repository import PlayerUpdatesRepository

if TYPE_CHECKING:
    from ..database import Database


class SQLitePlayerUpdatesRepository(PlayerUpdatesRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_channel_id(self, guild_id: int) -> int | None:
        row = await self._db.fetch_one(
            "SELECT channel_id FROM player_updates WHERE guild_id = ?",
            (guild_id,),
        )
        return row["channel_id"] if row else None

    async def set_channel(self, guild_id: int, channel_id: int) -> None:
        await self._db.execute(
            """
            INSERT INTO player_updates (guild_id, channel_id)
            VALUES (?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
                channel_id = excluded.channel_id,
                updated_at = strftime('%Y-%m-%dT%H:%M:%f','now')
            """,
            (guild_id, channel_id),
        )

    async def remove(self, guild_id: int) -> bool:
        deleted = await self._db.execute(
            "DELETE FROM player_updates WHERE guild_id = ?",
            (guild_id,),
        )
        return deleted > 0
