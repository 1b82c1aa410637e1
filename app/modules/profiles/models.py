# Supabase table: profiles, storage bucket: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# DDL lives in supabase/migrations/

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, default: gen_random_uuid())
- full_name: text (not null)
- email: text (unique, not null)
- phone: text (nullable)
- birth_date: date (nullable)
- height: integer (nullable) - in cm
- weight: integer (nullable) - in kg
- address: text (nullable)
- avatar_url: text (nullable) - public URL in the profiles bucket
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), maintained by trigger)

Storage bucket "profiles" (public):
- avatars/<epoch millis>.<ext>
"""

PROFILES_TABLE = "profiles"
AVATAR_FOLDER = "avatars"
