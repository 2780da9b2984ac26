# Supabase tables: members
# Owned by the user profile service; this backend only reads it.

"""
Expected Supabase table structure:

members:
- id: uuid (primary key)
- username: text (not null, unique)
- first_name: text
- last_name: text
- email: text
- bio: text (nullable)
- skills: text[] (default: '{}')
- password: text - never selected here
"""
