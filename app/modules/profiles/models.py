# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via the backing store in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- full_name: text (not null, default: '') - seeded from user_metadata.full_name
- bio: text (nullable)
- website: text (nullable)
- github: text (nullable) - code-hosting handle
- twitter: text (nullable) - social handle
- created_at: timestamp (default: now())

Note: a profile row is created the first time a user is seen with a session
and never deleted. Credentials live only in auth.users.
"""
