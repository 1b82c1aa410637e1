# Supabase tables: friendships, friendship_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# DDL lives in supabase/migrations/

"""
Expected Supabase table structure:

friendships:
- id: uuid (primary key)
- user_a_id: uuid (foreign key to profiles.id, not null)
- user_b_id: uuid (foreign key to profiles.id, not null)
- started_at: timestamptz (default: now())
- ended_at: timestamptz (nullable) - null while the friendship is active
- check (user_a_id <> user_b_id)
- unique index on (least(user_a_id, user_b_id), greatest(user_a_id, user_b_id))
  one row per unordered pair, reused on reactivation, never deleted

friendship_logs:
- id: uuid (primary key)
- user_a_id: uuid (foreign key to profiles.id, not null) - actor of the request
- user_b_id: uuid (foreign key to profiles.id, not null) - other side of the request
- action: text (not null) - values: started, ended
- created_at: timestamptz (default: now())
  append-only, keeps the orientation of the request
"""

from enum import Enum

FRIENDSHIPS_TABLE = "friendships"
FRIENDSHIP_LOGS_TABLE = "friendship_logs"


class FriendshipAction(str, Enum):
    STARTED = "started"
    ENDED = "ended"


class FriendshipOutcome(str, Enum):
    CREATED = "created"
    REACTIVATED = "reactivated"
    ALREADY_FRIENDS = "already_friends"
    ENDED = "ended"
    NOT_FRIENDS = "not_friends"
