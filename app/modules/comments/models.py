# Supabase tables: comments, comment_votes
# This file documents the expected database schema
# Actual operations are handled via the backing store in service.py

"""
Expected Supabase table structure:

comments:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- user_id: uuid (nullable, references auth.users.id) - null for anonymous comments
- content: text (not null)
- created_at: timestamp (default: now())

comment_votes:
- id: uuid (primary key)
- comment_id: uuid (foreign key to comments.id, not null)
- user_id: uuid (references auth.users.id, not null)
- vote_type: text (not null) - values: up, down
- created_at: timestamp (default: now())

Comments carry no score column; the score is always tallied from
comment_votes. One row per (comment_id, user_id) is kept by the
application, which updates vote_type in place when a voter changes
direction.
"""
