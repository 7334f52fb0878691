# scripts/init_db.py
import asyncio
from laborops.db import engine
# Importing the package registers every model on Base.metadata
from laborops.models.base import Base
import laborops.models  # noqa: F401


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("All missing tables created.")

if __name__ == "__main__":
    asyncio.run(create_tables())
