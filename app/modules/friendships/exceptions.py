"""
Failures of a connect/disconnect request.

Only SelfFriendshipError is a caller mistake; the others are reported to the
caller as one generic failure. FriendshipLogWriteError means the friendship
row was already changed when the audit append failed.
"""


class FriendshipError(Exception):
    step = "friendship"

    def __init__(self, message: str, actor_id: str = None, other_id: str = None):
        super().__init__(message)
        self.actor_id = actor_id
        self.other_id = other_id


class SelfFriendshipError(FriendshipError):
    step = "validation"


class FriendshipLookupError(FriendshipError):
    step = "lookup"


class FriendshipWriteError(FriendshipError):
    step = "write"


class FriendshipLogWriteError(FriendshipError):
    step = "log"
