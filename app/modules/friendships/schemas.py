from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID
from app.modules.friendships.models import FriendshipAction, FriendshipOutcome


class FriendshipRequest(BaseModel):
    actor_id: UUID
    other_id: UUID


class FriendshipResponse(BaseModel):
    id: str
    user_a_id: str
    user_b_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FriendshipLogResponse(BaseModel):
    id: str
    user_a_id: str  # actor
    user_b_id: str  # other
    action: FriendshipAction
    created_at: datetime

    class Config:
        from_attributes = True


class FriendshipResult(BaseModel):
    outcome: FriendshipOutcome
    friendship: Optional[FriendshipResponse] = None
    message: Optional[str] = None
