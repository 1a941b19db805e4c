"""
Professional profile API endpoints
The practice has a single profile row; it is created empty on first access.
"""
from typing import Optional
from fastapi import APIRouter, Depends

from app.api.deps import get_storage
from app.models import Profile
from app.schemas.patient import ProfileUpdate, ProfileResponse
from app.services.storage import StorageRepository

router = APIRouter(prefix="/profile", tags=["Profile"])


async def load_profile(storage: StorageRepository, create: bool = True) -> Optional[Profile]:
    profiles = await storage.select("profiles", order_by="id")
    if profiles:
        return profiles[0]
    if not create:
        return None
    [profile] = await storage.insert("profiles", [{"full_name": "", "crm": ""}])
    return profile


@router.get("", response_model=ProfileResponse)
async def get_profile(storage: StorageRepository = Depends(get_storage)):
    return await load_profile(storage)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    profile_in: ProfileUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    profile = await load_profile(storage)
    return await storage.update("profiles", profile.id, profile_in.model_dump(exclude_unset=True))
