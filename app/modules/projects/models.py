# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via the backing store in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key, default: gen_random_uuid())
- title: text (not null)
- description: text (not null)
- tags: text (not null, default: '') - comma-separated, stored trimmed
- creator_id: uuid (nullable, references auth.users.id) - null for anonymous submissions
- created_at: timestamp (default: now())
- vote_count: integer (not null, default: 0)

Note: vote_count is a denormalized counter written directly by the vote
endpoint. There is no per-voter project vote table, so the same account can
move the counter repeatedly.
"""
