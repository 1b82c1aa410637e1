from dataclasses import dataclass
from typing import Iterable, List, Mapping, Any
from app.modules.friendships.exceptions import SelfFriendshipError


def normalize_id(value: Any) -> str:
    """Profile ids are uuids; Postgres returns them lowercase whatever case was sent."""
    return str(value).strip().lower()


@dataclass(frozen=True)
class FriendPair:
    """Unordered pair of two distinct profile ids, stored in canonical order."""
    user_a_id: str
    user_b_id: str

    @classmethod
    def of(cls, first: str, second: str) -> "FriendPair":
        first, second = normalize_id(first), normalize_id(second)
        if first == second:
            raise SelfFriendshipError("Cannot pair a profile with itself", first, second)
        if second < first:
            first, second = second, first
        return cls(first, second)

    def matches_row(self, row: Mapping[str, Any]) -> bool:
        """True if a stored row holds this pair, in either orientation."""
        stored = {normalize_id(row.get("user_a_id")), normalize_id(row.get("user_b_id"))}
        return stored == {self.user_a_id, self.user_b_id}

    def or_filter(self) -> str:
        """PostgREST `or` predicate matching the pair in either orientation."""
        a, b = self.user_a_id, self.user_b_id
        return (
            f"and(user_a_id.eq.{a},user_b_id.eq.{b}),"
            f"and(user_a_id.eq.{b},user_b_id.eq.{a})"
        )

    def as_row(self) -> dict:
        return {"user_a_id": self.user_a_id, "user_b_id": self.user_b_id}


def counterpart(row: Mapping[str, Any], user_id: str) -> str | None:
    user_id = normalize_id(user_id)
    user_a, user_b = normalize_id(row.get("user_a_id")), normalize_id(row.get("user_b_id"))
    if user_a == user_id:
        return user_b
    if user_b == user_id:
        return user_a
    return None


def active_counterpart_ids(rows: Iterable[Mapping[str, Any]], user_id: str) -> List[str]:
    """Ids of everyone holding an active friendship with user_id, first-seen order, no duplicates."""
    user_id = normalize_id(user_id)
    seen = []
    for row in rows:
        if row.get("ended_at") is not None:
            continue
        other = counterpart(row, user_id)
        if other is not None and other != user_id and other not in seen:
            seen.append(other)
    return seen
