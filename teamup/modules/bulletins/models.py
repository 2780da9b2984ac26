# Supabase tables: bulletins
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py

"""
Expected Supabase table structure:

bulletins:
- id: uuid (primary key, default: gen_random_uuid())
- author_id: text (not null)
- title: text (not null)
- description: text (not null, default: '')
- group_ids: text[] (not null, default: '{}') - no foreign key, see groups
- date: text (not null, default: '')
- image: text (not null, default: '') - image URL
- tags: text[] (not null, default: '{}')
- created_at: timestamp (default: now())

Recommended index: GIN on group_ids for deletes by group reference.
"""
