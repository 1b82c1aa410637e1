"""
User-facing notification texts.
The admin UI shows one generic message per outcome; English and Turkish are shipped.
"""

from app.config import settings

DEFAULT_LOCALE = "en"

MESSAGES = {
    "en": {
        "friendship.created": "Friendship started",
        "friendship.reactivated": "Friendship started again",
        "friendship.already_friends": "These users are already friends",
        "friendship.ended": "Friendship ended",
        "friendship.not_friends": "These users are not currently friends",
        "friendship.self": "A user cannot be friends with themselves",
        "friendship.failed": "An error occurred while updating the friendship",
        "profile.not_found": "User not found",
        "profile.email_taken": "A user with this email already exists",
        "profile.required": "Name and email are required",
        "profile.failed": "An error occurred while saving the user",
        "avatar.too_large": "File size must be smaller than 5MB",
        "avatar.not_image": "Only image files can be uploaded",
        "avatar.failed": "An error occurred while uploading the photo",
    },
    "tr": {
        "friendship.created": "Arkadaşlık başlatıldı",
        "friendship.reactivated": "Arkadaşlık yeniden başlatıldı",
        "friendship.already_friends": "Bu kullanıcılar zaten arkadaş",
        "friendship.ended": "Arkadaşlık sonlandırıldı",
        "friendship.not_friends": "Bu kullanıcılar şu anda arkadaş değil",
        "friendship.self": "Bir kullanıcı kendisiyle arkadaş olamaz",
        "friendship.failed": "Arkadaşlık güncellenirken bir hata oluştu",
        "profile.not_found": "Kullanıcı bulunamadı",
        "profile.email_taken": "Bu e-posta ile kayıtlı bir kullanıcı zaten var",
        "profile.required": "Ad ve e-posta alanları zorunludur",
        "profile.failed": "Kullanıcı kaydedilirken bir hata oluştu",
        "avatar.too_large": "Dosya boyutu 5MB'dan küçük olmalıdır",
        "avatar.not_image": "Yalnızca görsel dosyaları yüklenebilir",
        "avatar.failed": "Fotoğraf yüklenirken bir hata oluştu",
    },
}


def message(key: str, locale: str | None = None) -> str:
    catalog = MESSAGES.get(locale or settings.locale) or MESSAGES[DEFAULT_LOCALE]
    return catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
