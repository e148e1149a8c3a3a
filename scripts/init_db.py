import asyncio

from knight_service.db.engine import get_engine
from knight_service.db.schema import metadata


async def reset_schema():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)
    await engine.dispose()


def main():
    asyncio.run(reset_schema())
    print("DB schema created.")

if __name__ == "__main__":
    main()
