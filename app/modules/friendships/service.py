from supabase import Client
from app.modules.friendships.models import (
    FRIENDSHIPS_TABLE, FRIENDSHIP_LOGS_TABLE, FriendshipAction, FriendshipOutcome
)
from app.modules.friendships.schemas import FriendshipResponse, FriendshipLogResponse, FriendshipResult
from app.modules.friendships.pairs import FriendPair, active_counterpart_ids, normalize_id
from app.modules.friendships.exceptions import (
    FriendshipLookupError, FriendshipWriteError, FriendshipLogWriteError
)
from app.modules.profiles.models import PROFILES_TABLE
from app.modules.profiles.schemas import ProfileResponse
from app.database.supabase_client import is_unique_violation
from app.core.messages import message
from typing import Callable, List, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _PairAlreadyStored(Exception):
    """Insert lost the race against another request creating the same pair."""


class FriendshipService:
    """
    Decides how a connect/disconnect request changes the single friendships
    row of a pair, then appends one friendship_logs entry for every change.

    The row write always happens before the log append. PostgREST offers no
    transaction spanning both, so a failed append after a successful row
    write is reported as FriendshipLogWriteError and not undone.
    """

    def __init__(self, supabase: Client, clock: Optional[Callable[[], datetime]] = None):
        self.supabase = supabase
        self.clock = clock or utcnow

    def _now(self) -> str:
        return self.clock().isoformat()

    def connect(self, actor_id: str, other_id: str) -> FriendshipResult:
        """Start (or restart) the friendship between actor_id and other_id"""
        actor_id, other_id = normalize_id(actor_id), normalize_id(other_id)
        pair = FriendPair.of(actor_id, other_id)
        existing = self._find_pair(pair, actor_id, other_id)

        if existing is None:
            try:
                row = self._insert_pair(pair, actor_id, other_id)
                outcome = FriendshipOutcome.CREATED
            except _PairAlreadyStored:
                logger.info(f"Pair {pair.user_a_id}/{pair.user_b_id} was created concurrently, re-reading")
                existing = self._find_pair(pair, actor_id, other_id)
                if existing is None:
                    raise FriendshipWriteError("Pair conflict but no row found", actor_id, other_id)

        if existing is not None:
            if existing.get("ended_at") is None:
                logger.info(f"Connect {actor_id} -> {other_id}: already friends")
                return self._result(FriendshipOutcome.ALREADY_FRIENDS, existing)
            row = self._reactivate(existing, actor_id, other_id)
            outcome = FriendshipOutcome.REACTIVATED

        self._append_log(actor_id, other_id, FriendshipAction.STARTED)
        logger.info(f"Connect {actor_id} -> {other_id}: {outcome.value} friendship {row['id']}")
        return self._result(outcome, row)

    def disconnect(self, actor_id: str, other_id: str) -> FriendshipResult:
        """End the active friendship between actor_id and other_id, if any"""
        actor_id, other_id = normalize_id(actor_id), normalize_id(other_id)
        pair = FriendPair.of(actor_id, other_id)
        active = self._find_pair(pair, actor_id, other_id, active_only=True)
        if active is None:
            logger.info(f"Disconnect {actor_id} -> {other_id}: not friends")
            return self._result(FriendshipOutcome.NOT_FRIENDS, None)

        try:
            result = self.supabase.table(FRIENDSHIPS_TABLE)\
                .update({"ended_at": self._now()})\
                .eq("id", active["id"])\
                .is_("ended_at", "null")\
                .execute()
        except Exception as e:
            logger.error(f"Error ending friendship {active['id']}: {e}")
            raise FriendshipWriteError(str(e), actor_id, other_id) from e
        if not result.data:
            # Ended by an overlapping request after our lookup
            logger.info(f"Disconnect {actor_id} -> {other_id}: friendship {active['id']} already ended")
            return self._result(FriendshipOutcome.NOT_FRIENDS, None)

        self._append_log(actor_id, other_id, FriendshipAction.ENDED)
        logger.info(f"Disconnect {actor_id} -> {other_id}: ended friendship {active['id']}")
        return self._result(FriendshipOutcome.ENDED, result.data[0])

    def active_friends_of(self, user_id: str) -> List[ProfileResponse]:
        """Profiles holding an active friendship with user_id, read fresh from the store"""
        user_id = normalize_id(user_id)
        try:
            rows = self.supabase.table(FRIENDSHIPS_TABLE)\
                .select("*")\
                .or_(f"user_a_id.eq.{user_id},user_b_id.eq.{user_id}")\
                .execute()
            friend_ids = active_counterpart_ids(rows.data or [], user_id)
            if not friend_ids:
                return []
            profiles = self.supabase.table(PROFILES_TABLE)\
                .select("*")\
                .in_("id", friend_ids)\
                .order("full_name")\
                .execute()
        except Exception as e:
            logger.error(f"Error loading friends of {user_id}: {e}")
            raise FriendshipLookupError(str(e), user_id) from e
        return [ProfileResponse(**profile) for profile in profiles.data]

    def logs_for(self, user_id: str) -> List[FriendshipLogResponse]:
        """Every log entry involving user_id, newest first"""
        user_id = normalize_id(user_id)
        try:
            result = self.supabase.table(FRIENDSHIP_LOGS_TABLE)\
                .select("*")\
                .or_(f"user_a_id.eq.{user_id},user_b_id.eq.{user_id}")\
                .order("created_at", desc=True)\
                .order("id", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading friendship logs of {user_id}: {e}")
            raise FriendshipLookupError(str(e), user_id) from e
        return [FriendshipLogResponse(**log) for log in result.data]

    def _find_pair(self, pair: FriendPair, actor_id: str, other_id: str, active_only: bool = False) -> Optional[dict]:
        try:
            query = self.supabase.table(FRIENDSHIPS_TABLE)\
                .select("*")\
                .or_(pair.or_filter())
            if active_only:
                query = query.is_("ended_at", "null")
            result = query.order("started_at", desc=True).limit(1).execute()
        except Exception as e:
            logger.error(f"Error looking up friendship {pair.user_a_id}/{pair.user_b_id}: {e}")
            raise FriendshipLookupError(str(e), actor_id, other_id) from e
        rows = [row for row in result.data or [] if pair.matches_row(row)]
        return rows[0] if rows else None

    def _insert_pair(self, pair: FriendPair, actor_id: str, other_id: str) -> dict:
        try:
            result = self.supabase.table(FRIENDSHIPS_TABLE).insert({
                **pair.as_row(),
                "started_at": self._now(),
                "ended_at": None,
            }).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise _PairAlreadyStored() from e
            logger.error(f"Error creating friendship {pair.user_a_id}/{pair.user_b_id}: {e}")
            raise FriendshipWriteError(str(e), actor_id, other_id) from e
        if not result.data:
            raise FriendshipWriteError("Friendship insert returned no row", actor_id, other_id)
        return result.data[0]

    def _reactivate(self, row: dict, actor_id: str, other_id: str) -> dict:
        try:
            result = self.supabase.table(FRIENDSHIPS_TABLE)\
                .update({"started_at": self._now(), "ended_at": None})\
                .eq("id", row["id"])\
                .execute()
        except Exception as e:
            logger.error(f"Error reactivating friendship {row['id']}: {e}")
            raise FriendshipWriteError(str(e), actor_id, other_id) from e
        if not result.data:
            raise FriendshipWriteError(f"Friendship {row['id']} was not updated", actor_id, other_id)
        return result.data[0]

    def _append_log(self, actor_id: str, other_id: str, action: FriendshipAction):
        try:
            self.supabase.table(FRIENDSHIP_LOGS_TABLE).insert({
                "user_a_id": str(actor_id),
                "user_b_id": str(other_id),
                "action": action.value,
                "created_at": self._now(),
            }).execute()
        except Exception as e:
            logger.error(
                f"Friendship row for {actor_id}/{other_id} changed but '{action.value}' log append failed: {e}"
            )
            raise FriendshipLogWriteError(str(e), actor_id, other_id) from e

    def _result(self, outcome: FriendshipOutcome, row: Optional[dict]) -> FriendshipResult:
        return FriendshipResult(
            outcome=outcome,
            friendship=FriendshipResponse(**row) if row else None,
            message=message(f"friendship.{outcome.value}"),
        )
