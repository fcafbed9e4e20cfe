"""Initialize SmartMeal tables and the JSON document directories"""
import asyncio

from backend.database import create_tables
from backend.services.document_store import get_document_store


async def init():
    await create_tables()
    get_document_store().ensure_dirs()
    print("Database tables and data directories created successfully.")


if __name__ == "__main__":
    asyncio.run(init())
