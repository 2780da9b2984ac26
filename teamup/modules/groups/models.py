# Supabase tables: groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key, default: gen_random_uuid())
- title: text (not null)
- description: text (not null, default: '')
- owner_id: text (not null) - never changed after insert
- members: text[] (not null, default: '{}')
- tags: text[] (not null, default: '{}') - values: STUDY, PROJECT, HACKATHON, CASECOMPETITION
- closed: boolean (not null, default: false)
- date: text (not null, default: '') - free text
- created_at: timestamp (default: now())

No foreign keys point at groups. Bulletins reference groups through
bulletins.group_ids and are removed by GroupService.delete_group and the
orphaned bulletin reconciliation job.
"""
