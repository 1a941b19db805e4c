"""
Shared FastAPI dependencies
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_session
from app.services.storage import StorageRepository


async def get_storage(db: AsyncSession = Depends(get_async_session)) -> StorageRepository:
    """
    Storage repository bound to the request's session
    Usage in FastAPI routes:
        async def my_route(storage: StorageRepository = Depends(get_storage)):
    """
    return StorageRepository(db)
