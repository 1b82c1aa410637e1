from supabase import Client
from app.config import settings
from app.modules.profiles.models import AVATAR_FOLDER
from typing import Optional
import logging
import time

logger = logging.getLogger(__name__)


class AvatarTooLargeError(ValueError):
    pass


class AvatarTypeError(ValueError):
    pass


class AvatarStorage:
    """Profile pictures in the public Supabase Storage bucket."""

    def __init__(self, supabase: Client, bucket: Optional[str] = None, max_bytes: Optional[int] = None):
        self.supabase = supabase
        self.bucket_name = bucket or settings.avatar_bucket
        self.max_bytes = max_bytes or settings.avatar_max_bytes

    @staticmethod
    def build_path(filename: Optional[str]) -> str:
        ext = (filename or "").rsplit(".", 1)[-1].lower() if "." in (filename or "") else "bin"
        return f"{AVATAR_FOLDER}/{int(time.time() * 1000)}.{ext}"

    def validate(self, content: bytes, content_type: Optional[str]):
        if len(content) > self.max_bytes:
            raise AvatarTooLargeError(f"{len(content)} bytes exceeds {self.max_bytes}")
        if not content_type or not content_type.startswith("image/"):
            raise AvatarTypeError(f"Unsupported content type: {content_type}")

    def upload(self, content: bytes, filename: Optional[str], content_type: Optional[str]) -> tuple[str, str]:
        """Upload avatar and return (storage path, public URL)"""
        self.validate(content, content_type)
        path = self.build_path(filename)
        bucket = self.supabase.storage.from_(self.bucket_name)
        try:
            bucket.upload(path, content, {"content-type": content_type})
        except Exception as e:
            logger.error(f"Failed to upload avatar to bucket {self.bucket_name}: {str(e)}")
            raise
        public_url = bucket.get_public_url(path)
        logger.info(f"Uploaded avatar {path}")
        return path, public_url
