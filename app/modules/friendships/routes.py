from fastapi import APIRouter, Depends, Response
from app.database.supabase_client import get_supabase
from app.modules.friendships.schemas import FriendshipRequest, FriendshipResult, FriendshipLogResponse
from app.modules.friendships.models import FriendshipOutcome
from app.modules.friendships.service import FriendshipService
from app.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/friendships", tags=["friendships"])

def get_friendship_service(supabase: Client = Depends(get_supabase)) -> FriendshipService:
    return FriendshipService(supabase)


@router.post("/connect", response_model=FriendshipResult)
async def connect(
    request: FriendshipRequest,
    response: Response,
    service: FriendshipService = Depends(get_friendship_service)
):
    """Make two profiles friends: creates the pair row, reactivates an ended one, or reports already friends"""
    result = service.connect(str(request.actor_id), str(request.other_id))
    if result.outcome == FriendshipOutcome.CREATED:
        response.status_code = 201
    return result


@router.post("/disconnect", response_model=FriendshipResult)
async def disconnect(
    request: FriendshipRequest,
    service: FriendshipService = Depends(get_friendship_service)
):
    """End the active friendship of two profiles, or report that they are not friends"""
    return service.disconnect(str(request.actor_id), str(request.other_id))


@router.get("/{user_id}/friends", response_model=List[ProfileResponse])
async def list_friends(
    user_id: UUID,
    service: FriendshipService = Depends(get_friendship_service)
):
    """Profiles currently friends with the user"""
    return service.active_friends_of(str(user_id))


@router.get("/{user_id}/logs", response_model=List[FriendshipLogResponse])
async def list_logs(
    user_id: UUID,
    service: FriendshipService = Depends(get_friendship_service)
):
    """Friendship history of the user, newest first"""
    return service.logs_for(str(user_id))
