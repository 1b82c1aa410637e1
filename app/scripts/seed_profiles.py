"""
Seed Profiles Script
Inserts the sample profiles used by the admin panel demo.
Safe to re-run: profiles whose email already exists are left untouched.

    python -m app.scripts.seed_profiles
"""

import sys

from app.database.supabase_client import SupabaseClient
from app.modules.profiles.models import PROFILES_TABLE
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_PROFILES = [
    {
        "full_name": "Ahmet Yılmaz",
        "email": "ahmet@example.com",
        "phone": "+90 555 123 4567",
        "birth_date": "1990-05-15",
        "height": 175,
        "weight": 70,
        "address": "İstanbul, Türkiye",
    },
    {
        "full_name": "Ayşe Demir",
        "email": "ayse@example.com",
        "phone": "+90 555 987 6543",
        "birth_date": "1985-08-22",
        "height": 160,
        "weight": 55,
        "address": "Ankara, Türkiye",
    },
    {
        "full_name": "Mehmet Kaya",
        "email": "mehmet@example.com",
        "phone": "+90 555 456 7890",
        "birth_date": "1992-12-03",
        "height": 180,
        "weight": 75,
        "address": "İzmir, Türkiye",
    },
    {
        "full_name": "Fatma Özkan",
        "email": "fatma@example.com",
        "phone": "+90 555 321 6547",
        "birth_date": "1988-03-17",
        "height": 165,
        "weight": 60,
        "address": "Bursa, Türkiye",
    },
]


def seed_profiles(supabase: Client, profiles=SAMPLE_PROFILES) -> int:
    """Insert missing sample profiles, returns how many were created"""
    logger.info("Seeding profiles...")
    created_count = 0

    for profile in profiles:
        try:
            existing = supabase.table(PROFILES_TABLE)\
                .select("id")\
                .eq("email", profile["email"])\
                .execute()

            if existing.data:
                logger.debug(f"Profile exists: {profile['email']}")
                continue

            supabase.table(PROFILES_TABLE).insert(profile).execute()
            created_count += 1
            logger.debug(f"Created profile: {profile['email']}")
        except Exception as e:
            logger.error(f"Error processing profile {profile['email']}: {e}")

    logger.info(f"Profiles seeded: {created_count} created, {len(profiles) - created_count} skipped")
    return created_count


def main():
    try:
        seed_profiles(SupabaseClient.get_service_client())
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
