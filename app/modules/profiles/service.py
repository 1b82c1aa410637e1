from supabase import Client
from app.modules.profiles.models import PROFILES_TABLE
from app.modules.profiles.schemas import ProfileCreate, ProfileUpdate, ProfileResponse
from app.database.supabase_client import is_unique_violation
from app.core.messages import message
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("full_name", "email")


def _escape_like(term: str) -> str:
    # PostgREST or= values are comma/paren delimited
    for ch in ",()":
        term = term.replace(ch, " ")
    return term.strip()


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_profiles(self, search: Optional[str] = None) -> List[ProfileResponse]:
        """List profiles newest first, optionally matching name or email (case-insensitive)"""
        try:
            query = self.supabase.table(PROFILES_TABLE).select("*")
            term = _escape_like(search or "")
            if term:
                query = query.or_(f"full_name.ilike.*{term}*,email.ilike.*{term}*")
            result = query.order("created_at", desc=True).execute()
            return [ProfileResponse(**profile) for profile in result.data]
        except Exception as e:
            logger.error(f"Error listing profiles: {e}")
            raise HTTPException(status_code=500, detail=message("profile.failed"))

    def get_profile(self, profile_id: str) -> ProfileResponse:
        """Get profile by ID"""
        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .select("*")\
                .eq("id", profile_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=message("profile.failed"))

        if not result.data:
            raise HTTPException(status_code=404, detail=message("profile.not_found"))
        return ProfileResponse(**result.data[0])

    def create_profile(self, profile_data: ProfileCreate) -> ProfileResponse:
        """Create a new profile"""
        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .insert(profile_data.model_dump(mode="json"))\
                .execute()
        except Exception as e:
            self._raise_write_error(e)

        if not result.data:
            raise HTTPException(status_code=500, detail=message("profile.failed"))
        logger.info(f"Created profile {result.data[0]['id']}")
        return ProfileResponse(**result.data[0])

    def update_profile(self, profile_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update profile; fields explicitly sent as null are cleared"""
        update_data = profile_data.model_dump(mode="json", exclude_unset=True)
        for column in REQUIRED_COLUMNS:
            if column in update_data and update_data[column] is None:
                raise HTTPException(status_code=400, detail=message("profile.required"))
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .update(update_data)\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            self._raise_write_error(e)

        if not result.data:
            raise HTTPException(status_code=404, detail=message("profile.not_found"))
        return ProfileResponse(**result.data[0])

    def delete_profile(self, profile_id: str) -> bool:
        """Delete profile"""
        try:
            result = self.supabase.table(PROFILES_TABLE)\
                .delete()\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=message("profile.failed"))

        if not result.data:
            raise HTTPException(status_code=404, detail=message("profile.not_found"))
        logger.info(f"Deleted profile {profile_id}")
        return True

    def _raise_write_error(self, exc: Exception):
        if is_unique_violation(exc):
            raise HTTPException(status_code=409, detail=message("profile.email_taken"))
        logger.error(f"Error saving profile: {exc}")
        raise HTTPException(status_code=500, detail=message("profile.failed"))
