from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import (
    ProfileCreate, ProfileUpdate, ProfileResponse, AvatarUploadResponse
)
from app.modules.profiles.service import ProfileService
from app.modules.profiles.storage import AvatarStorage, AvatarTooLargeError, AvatarTypeError
from app.core.messages import message
from supabase import Client
from typing import List, Optional
from uuid import UUID

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_avatar_storage(supabase: Client = Depends(get_supabase)) -> AvatarStorage:
    return AvatarStorage(supabase)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    search: Optional[str] = None,
    service: ProfileService = Depends(get_profile_service)
):
    """List all profiles, newest first. `search` matches name or email."""
    return service.list_profiles(search=search)


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(
    profile_data: ProfileCreate,
    service: ProfileService = Depends(get_profile_service)
):
    """Create a new profile"""
    return service.create_profile(profile_data)


@router.post("/avatar", response_model=AvatarUploadResponse, status_code=201)
async def upload_avatar(
    file: UploadFile = File(...),
    storage: AvatarStorage = Depends(get_avatar_storage)
):
    """
    Upload a profile picture to the public bucket.
    The returned URL is then saved on the profile as avatar_url.
    """
    # One byte past the limit is enough to reject an oversized file
    content = await file.read(storage.max_bytes + 1)
    try:
        path, public_url = storage.upload(content, file.filename, file.content_type)
    except AvatarTooLargeError:
        raise HTTPException(status_code=400, detail=message("avatar.too_large"))
    except AvatarTypeError:
        raise HTTPException(status_code=400, detail=message("avatar.not_image"))
    except Exception:
        raise HTTPException(status_code=500, detail=message("avatar.failed"))
    return AvatarUploadResponse(path=path, avatar_url=public_url)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: UUID,
    service: ProfileService = Depends(get_profile_service)
):
    """Get profile by ID"""
    return service.get_profile(str(profile_id))


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: UUID,
    profile_data: ProfileUpdate,
    service: ProfileService = Depends(get_profile_service)
):
    """Update profile"""
    return service.update_profile(str(profile_id), profile_data)


@router.delete("/{profile_id}", status_code=204)
async def delete_profile(
    profile_id: UUID,
    service: ProfileService = Depends(get_profile_service)
):
    """Delete profile"""
    service.delete_profile(str(profile_id))
    return None
