"""Create the tables and register a starter roster.

Existing players are left untouched, so the script can be re-run safely.
Usage: ``DATABASE_URL=... python seed.py``
"""

import asyncio
import logging

from scoreboard import db
from scoreboard.exceptions import PlayerAlreadyExists
from scoreboard.services import roster
from scoreboard.services.records import PlayerRecord

logger = logging.getLogger("seed")

ROSTER = [
    PlayerRecord(id="alice", name="Alice", nickname="Spin Doctor", avatar_emoji="🔥"),
    PlayerRecord(id="bob", name="Bob", nickname="The Wall", avatar_emoji="🧱"),
    PlayerRecord(id="carol", name="Carol", nickname="", avatar_emoji="🏓"),
    PlayerRecord(id="dave", name="Dave", nickname="Smash", avatar_emoji="💥"),
]


async def main():
    await db.ensure_tables_exist()
    assert db.AsyncSessionLocal is not None
    async with db.AsyncSessionLocal() as s:
        for player in ROSTER:
            try:
                await roster.create_player(s, player)
            except PlayerAlreadyExists:
                logger.info("Player %s already registered; skipping", player.id)
            else:
                logger.info("Registered player %s", player.id)
    assert db.engine is not None
    await db.engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
